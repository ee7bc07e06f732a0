#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных витрины.

Создает таблицы категорий, товаров, настроек и пользователей.
С флагом --sql только печатает SQL скрипт для PostgreSQL.
"""

import sys
from pathlib import Path

# Добавляем путь к модулю storefront
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy import inspect
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateTable

from storefront.db.database import engine
from storefront.db.models import Base


def print_sql():
    """Печатает DDL всех таблиц."""
    for table in Base.metadata.sorted_tables:
        ddl = CreateTable(table, if_not_exists=True).compile(dialect=postgresql.dialect())
        print(f"{str(ddl).strip()};\n")


def init_database() -> bool:
    """Создает все таблицы в базе данных."""
    print("🗄️ Инициализация базы данных...")

    try:
        Base.metadata.create_all(bind=engine)
        print("✅ Все таблицы созданы успешно!")

        tables = inspect(engine).get_table_names()
        print(f"📋 Таблиц в базе: {len(tables)}")
        for table in tables:
            print(f"  - {table}")

        return True

    except Exception as e:
        print(f"❌ Ошибка создания таблиц: {e}")
        return False


if __name__ == "__main__":
    if "--sql" in sys.argv[1:]:
        print_sql()
        sys.exit(0)
    if not init_database():
        sys.exit(1)
