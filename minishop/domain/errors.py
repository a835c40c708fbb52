# minishop/domain/errors.py
"""Exceptions raised by the service layer and mapped to HTTP codes by the routers."""


class ShopError(Exception):
    """Base class for all domain errors."""


class NotFoundError(ShopError, LookupError):
    """Referenced cart, cart item, product, category or order does not exist."""


class InvalidStateError(ShopError, ValueError):
    """Operation is not allowed in the current state (empty cart, no stock)."""


class ConflictError(ShopError, ValueError):
    """Unique constraint violated."""


class UpstreamError(ShopError):
    """Payment gateway call failed."""
