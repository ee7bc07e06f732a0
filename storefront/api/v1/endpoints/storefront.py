"""
API endpoints сессий витрины.

Сессия хранит корзину и фильтры покупателя в памяти процесса.
Заказ не создается в БД: checkout возвращает ссылку на WhatsApp
с готовым текстом и очищает корзину.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from storefront.api.deps import get_registry, get_storefront_session
from storefront.api.v1.presenters import cart_out, catalog_page
from storefront.schemas.storefront import (
    CartAddRequest,
    CartAddResponse,
    CartOut,
    CatalogPage,
    CheckoutOut,
    CheckoutRequest,
    CustomerUpdate,
    FiltersUpdate,
    QuantityUpdate,
    StorefrontSessionOut,
)
from storefront.services.checkout import BlankCustomerNameError, EmptyCartError
from storefront.services.storefront import (
    ProductNotFound,
    SessionNotFound,
    StorefrontRegistry,
    StorefrontSession,
)

router = APIRouter()


def _session_page(session: StorefrontSession) -> CatalogPage:
    return catalog_page(
        session.snapshot, session.search_term, session.selected_category_id
    )


def _session_out(session: StorefrontSession) -> StorefrontSessionOut:
    return StorefrontSessionOut(
        session_id=session.id,
        customer_name=session.customer_name,
        catalog=_session_page(session),
        cart=cart_out(session.cart),
    )


@router.post("/sessions", response_model=StorefrontSessionOut, status_code=201)
def open_session(registry: StorefrontRegistry = Depends(get_registry)):
    """
    Открыть сессию витрины.

    Сессия подписывается на изменения каталога и загружает его снимок.
    """
    return _session_out(registry.create())


@router.get("/sessions/{session_id}", response_model=StorefrontSessionOut)
def get_session(session: StorefrontSession = Depends(get_storefront_session)):
    """Текущее состояние сессии: фильтры, каталог, корзина."""
    return _session_out(session)


@router.delete("/sessions/{session_id}", status_code=204)
def close_session(session_id: str, registry: StorefrontRegistry = Depends(get_registry)):
    """Закрыть сессию: отписаться от изменений и выбросить корзину."""
    try:
        registry.close(session_id)
    except SessionNotFound:
        raise HTTPException(404, detail="Storefront session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ==================== КАТАЛОГ ====================


@router.get("/sessions/{session_id}/catalog", response_model=CatalogPage)
def get_session_catalog(session: StorefrontSession = Depends(get_storefront_session)):
    return _session_page(session)


@router.put("/sessions/{session_id}/filters", response_model=CatalogPage)
def update_filters(
    payload: FiltersUpdate,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """
    Задать строку поиска и выбранную категорию.

    Args:
        payload: search_term и selected_category_id (null - все категории)
        session: Сессия витрины

    Returns:
        CatalogPage: Каталог с примененными фильтрами
    """
    session.set_filters(payload.search_term, payload.selected_category_id)
    return _session_page(session)


# ==================== КОРЗИНА ====================


@router.get("/sessions/{session_id}/cart", response_model=CartOut)
def get_cart(session: StorefrontSession = Depends(get_storefront_session)):
    return cart_out(session.cart)


@router.post("/sessions/{session_id}/cart/items", response_model=CartAddResponse)
def add_cart_item(
    payload: CartAddRequest,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """
    Добавить товар в корзину.

    Товар без валидной цены не добавляется: ответ содержит added=false
    и неизмененную корзину.

    Raises:
        HTTPException: Если товара нет в каталоге
    """
    try:
        added = session.add_to_cart(payload.product_id)
    except ProductNotFound:
        raise HTTPException(404, detail="Product not found")
    return CartAddResponse(added=added, **cart_out(session.cart).model_dump())


@router.patch("/sessions/{session_id}/cart/items/{product_id}", response_model=CartOut)
def update_cart_item(
    product_id: str,
    payload: QuantityUpdate,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """
    Изменить количество товара в корзине.

    Позиция с количеством 0 удаляется. Товар, которого нет в корзине,
    игнорируется.
    """
    session.update_quantity(product_id, payload.delta)
    return cart_out(session.cart)


@router.delete("/sessions/{session_id}/cart", response_model=CartOut)
def clear_cart(session: StorefrontSession = Depends(get_storefront_session)):
    session.clear_cart()
    return cart_out(session.cart)


# ==================== ОФОРМЛЕНИЕ ====================


@router.put("/sessions/{session_id}/customer", response_model=StorefrontSessionOut)
def update_customer(
    payload: CustomerUpdate,
    session: StorefrontSession = Depends(get_storefront_session),
):
    session.customer_name = payload.customer_name
    return _session_out(session)


@router.post("/sessions/{session_id}/checkout", response_model=CheckoutOut)
def checkout(
    payload: CheckoutRequest,
    session: StorefrontSession = Depends(get_storefront_session),
):
    """
    Оформить заказ через WhatsApp.

    Собирает текст заказа, возвращает ссылку для открытия в новом окне,
    очищает корзину и имя покупателя.

    Raises:
        HTTPException: 422 если имя пустое, 400 если корзина пуста;
            в обоих случаях корзина не меняется
    """
    try:
        handoff = session.checkout(payload.customer_name)
    except BlankCustomerNameError as e:
        raise HTTPException(422, detail=str(e))
    except EmptyCartError as e:
        raise HTTPException(400, detail=str(e))

    return CheckoutOut(
        url=handoff.url,
        message=handoff.message,
        total=round(handoff.total, 2),
        total_label=handoff.total_label,
    )
