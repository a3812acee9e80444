"""Error taxonomy for the nutrition ledger."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class ValidationError(LedgerError):
    """Input outside the allowed domain for a named field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class InvalidMealError(ValidationError):
    """Meal rejected because it has no food items."""

    def __init__(self, message: str = "a meal needs at least one food item") -> None:
        super().__init__("items", message)


class NotFoundError(LedgerError):
    """Referenced entity does not exist."""


class PersistenceError(LedgerError):
    """Underlying key-value store failed to read or write."""


class RemoteServiceError(LedgerError):
    """A remote food-search or meal-generation call failed."""


class AuthenticationError(LedgerError):
    """Identity provider rejected a request."""

    def __init__(
        self, code: str | None, message: str = "authentication failed"
    ) -> None:
        super().__init__(message)
        self.code = code


class NotSignedInError(LedgerError):
    """An operation needs a signed-in user session."""
