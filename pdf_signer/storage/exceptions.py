class StorageError(Exception):
    """Raised when a signed file cannot be written to storage."""
