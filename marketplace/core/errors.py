from typing import Optional


class MarketplaceError(Exception):
    """Base class for errors rendered as ``{"error": message}`` responses."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MarketplaceError):
    status_code = 400
    default_message = "Invalid request"


class Unauthorized(MarketplaceError):
    status_code = 401
    default_message = "Could not validate credentials"


class Forbidden(MarketplaceError):
    status_code = 403
    default_message = "Not enough permissions"


class NotFound(MarketplaceError):
    status_code = 404
    default_message = "Not found"


class StoreError(MarketplaceError):
    """Persistence failure; the message never carries driver details."""

    status_code = 500
    default_message = "Internal server error"
