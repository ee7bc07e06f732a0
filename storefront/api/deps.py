"""
Общие зависимости API: шлюз каталога и реестр сессий витрины.

Оба объекта создаются при запуске приложения и хранятся в app.state.
"""

from fastapi import HTTPException, Request

from storefront.services.gateway import CatalogGateway
from storefront.services.storefront import (
    SessionNotFound,
    StorefrontRegistry,
    StorefrontSession,
)


def get_gateway(request: Request) -> CatalogGateway:
    return request.app.state.gateway


def get_registry(request: Request) -> StorefrontRegistry:
    return request.app.state.storefront_sessions


def get_storefront_session(session_id: str, request: Request) -> StorefrontSession:
    """Сессия витрины по ID из пути запроса."""
    try:
        return get_registry(request).get(session_id)
    except SessionNotFound:
        raise HTTPException(404, detail="Storefront session not found")
