"""Domain errors shared by services and the web layer."""


class NotFoundError(Exception):
    """Resource not found."""

    def __init__(self, message: str = "Resource not found"):
        self.message = message
        super().__init__(self.message)


class ValidationError(Exception):
    """Validation error."""

    def __init__(self, message: str = "Validation error"):
        self.message = message
        super().__init__(self.message)


class AuthError(Exception):
    """Missing or invalid credentials."""

    def __init__(self, message: str = "Unauthorized"):
        self.message = message
        super().__init__(self.message)


class UpstreamError(Exception):
    """External API, S3 or database failure."""

    def __init__(self, message: str = "Upstream failure", details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


class StorageError(Exception):
    """Object storage failure."""

    def __init__(self, message: str = "Storage error"):
        self.message = message
        super().__init__(self.message)


class PreconditionFailedError(StorageError):
    """Conditional write lost against a concurrent writer."""
