"""Cart storage"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Optional

from ..core.session import SessionManager
from ..services.cart_store import CartStore, CatalogProvider
from .merchandise import merchandise_db

logger = logging.getLogger(__name__)


class CartDatabase:
    """In-memory cart storage, one CartStore per cart id"""

    def __init__(self, catalog: CatalogProvider):
        self.catalog = catalog
        self._lock = threading.Lock()
        self.carts: dict[str, CartStore] = {}

    def create_cart(
        self,
        owner: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> CartStore:
        """Create a new empty cart, owned when created from a login session"""
        cart = CartStore(self.catalog, owner=owner, session_id=session_id)
        with self._lock:
            self.carts[cart.cart_id] = cart
        return cart

    def get_cart(self, cart_id: str) -> Optional[CartStore]:
        """Get a cart by ID"""
        return self.carts.get(cart_id)

    def delete_cart(self, cart_id: str) -> bool:
        """Delete a cart"""
        with self._lock:
            return self.carts.pop(cart_id, None) is not None

    def purge_expired(self, sessions: SessionManager, max_age_hours: int = 24) -> int:
        """
        Drop carts whose session has ended.

        Expired sessions are removed together with the carts they own.
        Carts idle for longer than ``max_age_hours`` go too, unless their
        session is still alive.

        Returns:
            Number of carts dropped
        """
        doomed = set()
        for session in sessions.expire_sessions(max_age_hours):
            doomed.update(session.cart_ids)

        cutoff = datetime.utcnow() - timedelta(hours=max_age_hours)
        with self._lock:
            for cart_id, cart in self.carts.items():
                live = cart.session_id and sessions.get_session(cart.session_id)
                if not live and cart.updated_at < cutoff:
                    doomed.add(cart_id)

            dropped = sum(1 for cart_id in doomed if self.carts.pop(cart_id, None) is not None)

        if dropped:
            logger.info(f"Dropped {dropped} expired cart(s)")
        return dropped

    def reset(self) -> None:
        with self._lock:
            self.carts.clear()


# Singleton instance
cart_db = CartDatabase(merchandise_db)
