"""
Главный модуль FastAPI приложения витрины напитков.

Содержит конфигурацию приложения, middleware и роутеры.
При запуске создает шлюз каталога и реестр сессий витрины.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.v1.routers import api_router
from storefront.core.config import settings
from storefront.db.database import SessionLocal
from storefront.services.gateway import CatalogGateway
from storefront.services.storefront import StorefrontRegistry

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Создание экземпляра FastAPI приложения
app = FastAPI(
    title=f"{settings.STORE_NAME} Catalog API",
    description="Каталог напитков с корзиной, заказом через WhatsApp и панелью управления",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Настройка CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": app.title, "version": app.version}


# Подключение API роутеров
app.include_router(api_router, prefix="/api/v1")


@app.on_event("startup")
def startup_event():
    """
    Событие запуска приложения.

    Создает шлюз каталога и реестр сессий витрины.
    """
    app.state.gateway = CatalogGateway(SessionLocal)
    app.state.storefront_sessions = StorefrontRegistry(app.state.gateway)
    logger.info("Storefront started")


@app.on_event("shutdown")
def shutdown_event():
    """
    Событие завершения приложения.

    Закрывает все сессии витрины и отключает шлюз от событий БД.
    """
    app.state.storefront_sessions.close_all()
    app.state.gateway.close()
    logger.info("Storefront stopped")
