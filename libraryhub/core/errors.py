"""
Domain errors raised by services and the repository.

Each error carries the HTTP status the API layer answers with; the handlers
registered in ``libraryhub.main`` turn them into ``{"message": ...}`` bodies.
"""


class LibraryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    status_code = 400


class NotFound(LibraryError):
    status_code = 404


class BookUnavailable(LibraryError):
    status_code = 400

    def __init__(self, message: str = "Book not available"):
        super().__init__(message)


class InternalError(LibraryError):
    status_code = 500
