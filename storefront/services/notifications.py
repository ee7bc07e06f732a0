"""
Уведомления об изменении каталога.

ChangeNotifier подключается к фабрике сессий SQLAlchemy. После каждого
commit, затронувшего категории, товары или настройки, вызываются все
подписчики (без аргументов). Срабатывает для любых изменений через ORM,
сделанных сессиями этой фабрики.
"""

import logging
import threading
from itertools import chain
from typing import Callable, Dict, List

from sqlalchemy import event
from sqlalchemy.orm import Session, sessionmaker

from storefront.db.models import Category, Product, Setting

logger = logging.getLogger(__name__)

# Модели, изменение которых требует обновить витрину
TRACKED_MODELS = (Category, Product, Setting)


class Subscription:
    """Подписка на изменения. unsubscribe() можно вызывать повторно."""

    def __init__(self, notifier: "ChangeNotifier", token: int):
        self._notifier = notifier
        self._token = token

    @property
    def active(self) -> bool:
        return self._notifier.is_subscribed(self._token)

    def unsubscribe(self) -> None:
        self._notifier._remove(self._token)


class ChangeNotifier:
    """Реестр подписчиков на изменения каталога."""

    def __init__(self):
        self._subscribers: Dict[int, Callable[[], None]] = {}
        self._next_token = 0
        self._lock = threading.Lock()
        # Отдельный флаг на экземпляр: к одной фабрике можно подключить несколько реестров
        self._changed_flag = f"catalog_changed:{id(self)}"
        self._targets: List[sessionmaker] = []

    def subscribe(self, callback: Callable[[], None]) -> Subscription:
        with self._lock:
            token = self._next_token
            self._next_token += 1
            self._subscribers[token] = callback
        return Subscription(self, token)

    def is_subscribed(self, token: int) -> bool:
        with self._lock:
            return token in self._subscribers

    def _remove(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def notify(self) -> None:
        """Вызвать всех подписчиков. Ошибка одного не мешает остальным."""
        with self._lock:
            callbacks = list(self._subscribers.values())
        for callback in callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Change subscriber failed")



    # ==================== СОБЫТИЯ SQLALCHEMY ====================

    def attach(self, session_factory: sessionmaker) -> None:
        """Отслеживать изменения в сессиях фабрики session_factory."""
        event.listen(session_factory, "after_flush", self._mark_changes)
        event.listen(session_factory, "after_commit", self._notify_after_commit)
        event.listen(session_factory, "after_soft_rollback", self._forget_rolled_back)
        self._targets.append(session_factory)

    def detach(self) -> None:
        """Отключиться от всех фабрик сессий."""
        for session_factory in self._targets:
            event.remove(session_factory, "after_flush", self._mark_changes)
            event.remove(session_factory, "after_commit", self._notify_after_commit)
            event.remove(
                session_factory, "after_soft_rollback", self._forget_rolled_back
            )
        self._targets.clear()

    def _mark_changes(self, session: Session, flush_context) -> None:
        # В after_flush коллекции new/dirty/deleted еще в состоянии до flush
        for obj in chain(session.new, session.dirty, session.deleted):
            if isinstance(obj, TRACKED_MODELS):
                session.info[self._changed_flag] = True
                return

    def _notify_after_commit(self, session: Session) -> None:
        if session.info.pop(self._changed_flag, False):
            self.notify()

    def _forget_rolled_back(self, session: Session, previous_transaction) -> None:
        session.info.pop(self._changed_flag, None)
