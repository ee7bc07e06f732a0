"""
Общие фикстуры тестов.

БД - файл SQLite во временной папке. DATABASE_URL выставляется до
импорта пакета, чтобы движок SQLAlchemy создавался уже на SQLite.
"""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEFAULT_WHATSAPP_NUMBER"] = "5511999999999"

import pytest
from fastapi.testclient import TestClient

from storefront.core.auth import AuthService
from storefront.db.database import SessionLocal, engine
from storefront.db.models import Base, Category, Product, Setting, User
from storefront.main import app
from storefront.schemas.catalog import ProductOut
from storefront.services.gateway import CatalogGateway

ADMIN_PASSWORD = "admin123"


@pytest.fixture(autouse=True)
def database():
    """Чистая схема для каждого теста."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def gateway():
    gateway = CatalogGateway(SessionLocal)
    yield gateway
    gateway.close()


@pytest.fixture
def catalog():
    """
    Каталог из двух категорий:
    Cervejas (order 1): Heineken 9,90, Sem preço "", Brahma 5.50
    Vinhos (order 2): Vinho Tinto 45,00
    """
    with SessionLocal() as db:
        db.add_all(
            [
                Category(id="c1", name="Cervejas", order=1),
                Category(id="c2", name="Vinhos", order=2),
            ]
        )
        db.flush()
        db.add_all(
            [
                Product(id="p1", name="Heineken", price="9,90", category_id="c1"),
                Product(id="p2", name="Sem preço", price="", category_id="c1"),
                Product(id="p3", name="Brahma", price="5.50", category_id="c1"),
                Product(id="p4", name="Vinho Tinto", price="45,00", category_id="c2"),
            ]
        )
        db.add(Setting(key="whatsapp_number", value="5511988887777"))
        db.commit()


def _create_user(username: str, is_admin: bool = True, is_active: bool = True) -> User:
    with SessionLocal() as db:
        user = User(
            username=username,
            email=f"{username}@admin.com",
            hashed_password=AuthService.get_password_hash(ADMIN_PASSWORD),
            is_admin=is_admin,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user


@pytest.fixture
def create_user():
    return _create_user


@pytest.fixture
def admin_headers(client):
    _create_user("admin")
    response = client.post(
        "/api/v1/admin/auth/login",
        json={"username": "admin", "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def make_product(
    product_id: str = "p1",
    price: str = "9,90",
    name: str = "Heineken",
    category_id: str = "c1",
) -> ProductOut:
    return ProductOut(id=product_id, name=name, price=price, category_id=category_id)
