# storefront/domain/errors.py


class ShopError(Exception):
    """Base class for domain errors; ``status_code`` is the HTTP mapping."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    status_code = 422


class NotFound(ShopError):
    status_code = 404


class Unauthorized(ShopError):
    status_code = 401


class EmptyCart(ShopError):
    status_code = 400


class FeedError(ShopError):
    """Bulk import feed could not be read or fetched."""

    status_code = 500


class StorageUnavailable(ShopError):
    """Backing medium failed or timed out. Never retried within a request."""

    status_code = 500
