"""Custom exceptions for position tracking operations."""


class TrackerError(Exception):
    """Base exception for tracker operations."""

    pass


class PositionNotFoundError(TrackerError):
    """Position not found for the given id."""

    def __init__(self, position_id: str):
        self.position_id = position_id
        super().__init__(f"Position not found: {position_id}")


class ValidationError(TrackerError):
    """Input rejected at the boundary before reaching the calculators."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PriceUnavailableError(TrackerError):
    """Error fetching a stock price from the price oracle."""

    pass


class ConfigCorruptError(TrackerError):
    """Stored strategy configuration could not be parsed."""

    pass


class PersistenceError(TrackerError):
    """Configuration storage could not be read or written."""

    pass
