"""Domain exception taxonomy shared by all marketplace services."""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base exception for marketplace domain failures."""


class ValidationError(MarketplaceError):
    """Raised when input breaks a business rule (bad range, illegal transition)."""


class NotFoundError(MarketplaceError):
    """Raised when a referenced record does not exist."""


class ForbiddenError(MarketplaceError):
    """Raised when the caller does not own the record being changed."""
