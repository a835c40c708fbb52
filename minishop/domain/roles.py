# minishop/domain/roles.py
import re
from typing import Iterable

ADMIN = "ADMIN"
USER = "USER"
MANAGER = "MANAGER"
SALES_MANAGER = "SALES_MANAGER"
PRODUCT_MANAGER = "PRODUCT_MANAGER"
STORE_KEEPER = "STORE_KEEPER"

_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_role_name(name: str) -> str:
    """
    Canonical form of a role name: trimmed, upper case, with runs of
    whitespace and hyphens collapsed into one underscore.

    >>> normalize_role_name(" store-keeper ")
    'STORE_KEEPER'
    """
    cleaned = _SEPARATORS.sub("_", name.strip()).upper()
    if not cleaned:
        raise ValueError("Role name must not be empty")
    return cleaned


def is_authorized(granted: Iterable[str], required: Iterable[str]) -> bool:
    """True when no role is required or the caller holds at least one of them."""
    required = set(required)
    if not required:
        return True
    return not required.isdisjoint(granted)
