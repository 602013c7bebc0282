class StoreError(Exception):
    """Base exception for all record store errors."""


class StoreUnavailableError(StoreError):
    """Raised when the record store is unreachable or returns an error payload."""


class RecordCreationError(StoreError):
    """Raised when a record cannot be inserted."""

    def __init__(self, reason: str, table: str | None = None) -> None:
        self.reason = reason
        self.table = table
        super().__init__(f"Failed to create {table or 'record'}: {reason}")


class MissingFieldsError(ValueError):
    """Raised when required form fields are empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")
