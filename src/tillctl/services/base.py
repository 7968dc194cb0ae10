"""BaseService: abstract foundation for all tillctl services.

Every service receives a :class:`Till` at construction time. The Till
owns the catalog, the cart, the transaction store, and the clock, so two
services built on the same till always see the same state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tillctl.infrastructure.till import Till


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class CheckoutService(BaseService):
            def checkout(self, ...) -> ServiceResult:
                with self._till.catalog.lock:
                    ...
    """

    def __init__(self, till: Till) -> None:
        self._till = till
