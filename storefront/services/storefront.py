"""
Сессии витрины.

Сессия хранит состояние одного покупателя: корзину, строку поиска,
выбранную категорию, имя для заказа и последний снимок каталога.
Живет в памяти процесса от open() до close().
"""

import logging
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional

from storefront.core.config import settings
from storefront.services.cart import Cart
from storefront.services.catalog_filter import CatalogView, filter_catalog
from storefront.services.checkout import CheckoutHandoff, compose_checkout
from storefront.services.gateway import CatalogGateway, CatalogSnapshot
from storefront.services.notifications import Subscription

logger = logging.getLogger(__name__)


class ProductNotFound(LookupError):
    """Товара нет в текущем снимке каталога."""


class SessionNotFound(LookupError):
    """Сессия витрины не найдена или уже закрыта."""


class StorefrontSession:
    """Состояние витрины одного покупателя."""

    def __init__(self, session_id: str, gateway: CatalogGateway):
        self.id = session_id
        self.gateway = gateway
        self.cart = Cart()
        self.search_term = ""
        self.selected_category_id: Optional[str] = None
        self.customer_name = ""
        self._snapshot = CatalogSnapshot()
        self._stale = True
        self._subscription: Optional[Subscription] = None

    @property
    def is_open(self) -> bool:
        return self._subscription is not None

    def open(self) -> "StorefrontSession":
        """Подписаться на изменения каталога и загрузить снимок."""
        if self._subscription is None:
            self._subscription = self.gateway.subscribe_to_changes(self._on_change)
        self.refresh()
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.cart.clear()

    def _on_change(self) -> None:
        # Вызывается из потока, сделавшего commit; загрузка откладывается
        self._stale = True

    def refresh(self) -> CatalogSnapshot:
        """
        Перечитать каталог целиком.

        Флаг сбрасывается до чтения: изменение, пришедшее во время
        чтения, снова помечает снимок устаревшим.
        """
        self._stale = False
        self._snapshot = self.gateway.fetch_snapshot()
        return self._snapshot

    @property
    def snapshot(self) -> CatalogSnapshot:
        if self._stale:
            return self.refresh()
        return self._snapshot

    # ==================== КАТАЛОГ ====================

    def set_filters(
        self, search_term: Optional[str] = None, selected_category_id: Optional[str] = None
    ) -> None:
        self.search_term = search_term or ""
        self.selected_category_id = selected_category_id or None

    def view(self) -> CatalogView:
        snapshot = self.snapshot
        return filter_catalog(
            snapshot.categories,
            snapshot.products,
            self.search_term,
            self.selected_category_id,
        )

    # ==================== КОРЗИНА ====================

    def add_to_cart(self, product_id: str) -> bool:
        """
        Добавить товар из текущего снимка каталога.

        Returns:
            bool: False, если цена товара невалидна и корзина не изменилась

        Raises:
            ProductNotFound: Товара нет в каталоге
        """
        product = self.snapshot.product(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return self.cart.add(product)

    def update_quantity(self, product_id: str, delta: int) -> bool:
        return self.cart.update_quantity(product_id, delta)

    def clear_cart(self) -> None:
        self.cart.clear()

    def checkout(self, customer_name: Optional[str] = None) -> CheckoutHandoff:
        """
        Подготовить передачу заказа и очистить корзину.

        Если имя не передано, используется сохраненное в сессии.

        Raises:
            CheckoutError: Имя пустое или корзина пуста; корзина не меняется
        """
        name = self.customer_name if customer_name is None else customer_name
        handoff = compose_checkout(self.cart, name, self.snapshot.whatsapp_number)
        self.cart.clear()
        self.customer_name = ""
        logger.info(f"Checkout handed off for session {self.id}")
        return handoff


class StorefrontRegistry:
    """
    Открытые сессии витрины процесса.

    Сессия, к которой не обращались дольше idle_minutes, закрывается
    при следующем вызове create() или get().
    """

    def __init__(
        self,
        gateway: CatalogGateway,
        idle_minutes: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        if idle_minutes is None:
            idle_minutes = settings.SESSION_IDLE_MINUTES
        self.idle_seconds = idle_minutes * 60
        self._clock = clock
        self._sessions: Dict[str, StorefrontSession] = {}
        self._last_access: Dict[str, float] = {}
        self._lock = threading.Lock()

    def _pop(self, session_id: str) -> Optional[StorefrontSession]:
        self._last_access.pop(session_id, None)
        return self._sessions.pop(session_id, None)

    def expire_idle(self) -> int:
        """
        Закрыть сессии, простаивающие дольше idle_minutes.

        Returns:
            int: Количество закрытых сессий
        """
        if self.idle_seconds <= 0:
            return 0

        deadline = self._clock() - self.idle_seconds
        with self._lock:
            expired = [
                self._pop(session_id)
                for session_id, last_access in list(self._last_access.items())
                if last_access < deadline
            ]
        for session in expired:
            session.close()
        if expired:
            logger.info(f"Closed {len(expired)} idle storefront sessions")
        return len(expired)

    def create(self) -> StorefrontSession:
        self.expire_idle()
        session = StorefrontSession(str(uuid.uuid4()), self.gateway).open()
        with self._lock:
            self._sessions[session.id] = session
            self._last_access[session.id] = self._clock()
        return session

    def get(self, session_id: str) -> StorefrontSession:
        self.expire_idle()
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._last_access[session_id] = self._clock()
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def close(self, session_id: str) -> None:
        with self._lock:
            session = self._pop(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        session.close()

    def close_all(self) -> None:
        with self._lock:
            sessions: List[StorefrontSession] = list(self._sessions.values())
            self._sessions.clear()
            self._last_access.clear()
        for session in sessions:
            session.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
