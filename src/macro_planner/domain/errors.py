"""Error types raised by the planning engine."""


class InvalidAmountError(ValueError):
    """Raised when a serving amount is negative or not a number."""


class InvalidTimeError(ValueError):
    """Raised when a meal time is not a valid HH:MM string."""


class MalformedDayError(ValueError):
    """Raised when a day plan does not have the fixed day/meal structure."""


class PersistenceError(RuntimeError):
    """Raised when a write to the external store fails."""


class MealTimeCascadeError(PersistenceError):
    """Raised when a meal time cascade stops before every meal was saved."""

    def __init__(
        self, message: str, applied: dict[int, str], failed_meal_id: int | None
    ) -> None:
        super().__init__(message)
        self.applied = applied
        self.failed_meal_id = failed_meal_id


class InvalidNameError(ValueError):
    """Raised when a food item name is empty."""
