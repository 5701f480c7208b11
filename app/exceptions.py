from typing import Optional


class SwarmError(Exception):
    """
    Base exception for all swarm engine errors

    Attributes:
    message: Human-readable error description
    suggestion: Optional hint for fixing the error
    """

    def __init__(self, message: str, suggestion: Optional[str] = None):
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.suggestion:
            msg += f" ({self.suggestion})"
        return msg


class InvalidConfiguration(SwarmError, ValueError):
    """Raised when a swarm configuration cannot produce a valid swarm."""


class EmptyLandmarkSet(InvalidConfiguration):
    """Raised when the landmark objective has no landmarks to measure against."""

    def __init__(self):
        super().__init__(
            "Landmark objective requires at least one landmark",
            "add a landmark or select the 'rastrigin' objective",
        )


class SwarmNotInitialized(SwarmError):
    """Raised when stepping a swarm that has no particles yet."""

    def __init__(self):
        super().__init__("Swarm has no particles", "call initialize() before step()")


class InvalidLandmarkFile(SwarmError):
    """Raised when an uploaded landmark table cannot be parsed."""
