class PayloadError(Exception):
    """Raised when a sign request body is missing fields or carries malformed values."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field
