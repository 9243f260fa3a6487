class LibraryError(Exception):
    """Base class for failures raised by the library services."""
    status_code = 400

    def __init__(self, detail):
        super().__init__(detail)
        self.detail = detail

class NotFound(LibraryError):
    status_code = 404

class BookUnavailable(LibraryError):
    pass

class AlreadyReturned(LibraryError):
    pass

class InvalidAmount(LibraryError):
    pass

class AlreadyExists(LibraryError):
    pass
