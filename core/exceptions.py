"""Error taxonomy shared by the services and the HTTP layer."""

from typing import Optional


class BookshelfError(Exception):
    """Base exception for the bookshelf backend"""
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class BadRequestError(BookshelfError):
    """Malformed or missing input"""
    status_code = 400
    message = "Bad request"


class UnauthorizedError(BookshelfError):
    """Missing, invalid or expired credential, or wrong password"""
    status_code = 401
    message = "Not authorized"


class InvalidTokenError(UnauthorizedError):
    """Session token failed signature, structure or expiry checks"""
    message = "Invalid or expired token"


class NotFoundError(BookshelfError):
    """Missing user, book or library entry"""
    status_code = 404
    message = "Not found"


class ConflictError(BookshelfError):
    """Uniqueness violation"""
    status_code = 409
    message = "Conflict"


class TooManyRequestsError(BookshelfError):
    """Login lockout window is active"""
    status_code = 429
    message = "Too many login attempts, try again later"

    def __init__(self, message: Optional[str] = None, retry_after: Optional[int] = None):
        self.retry_after = retry_after
        super().__init__(message)


class BadGatewayError(BookshelfError):
    """Upstream dependency failed"""
    status_code = 502
    message = "Bad gateway"


class CatalogError(BadGatewayError):
    """The external book catalog returned an error or an unreadable payload"""
    message = "Book catalog is unavailable"
