"""Error hierarchy for strain_multiplot."""

from typing import Any, Mapping, Optional


class MultiplotError(Exception):
    """Base exception for multiplot failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class MissingDependencyError(MultiplotError):
    """The tree has not been loaded, so no visibility mask exists yet."""


class MalformedInputError(MultiplotError, ValueError):
    """Collections JSON is missing required structure."""


class InvariantViolationError(MultiplotError):
    """A measurement lacks a usable identifier at render time."""


class AmbiguousSelectionWarning(UserWarning):
    """Several collections share the requested key."""


__all__ = [
    "MultiplotError",
    "MissingDependencyError",
    "MalformedInputError",
    "InvariantViolationError",
    "AmbiguousSelectionWarning",
]
