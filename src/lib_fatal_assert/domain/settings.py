"""Runtime settings for the assertion pipeline."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .errors import InvalidSetting

DEFAULT_EXIT_CODE = 1


@dataclass(frozen=True, slots=True)
class AssertSettings:
    """Immutable knobs consulted by predicates and the reporter.

    Attributes
    ----------
    enabled:
        When ``False`` predicates return without checking anything.
    exit_code:
        Status handed to the terminator. Must be a non-zero integer.
    capture_stack:
        Whether the report ends with a call-stack capture.
    """

    enabled: bool = True
    exit_code: int = DEFAULT_EXIT_CODE
    capture_stack: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.exit_code, bool) or not isinstance(self.exit_code, int):
            raise InvalidSetting(f"exit_code must be an integer, got {self.exit_code!r}")
        if self.exit_code == 0:
            raise InvalidSetting("exit_code must be non-zero")

    def with_overrides(self, **overrides: Any) -> "AssertSettings":
        """Return a copy with *overrides* applied.

        >>> AssertSettings().with_overrides(exit_code=3).exit_code
        3
        """

        return replace(self, **overrides)

    def as_dict(self) -> dict[str, object]:
        return {"enabled": self.enabled, "exit_code": self.exit_code, "capture_stack": self.capture_stack}


DEFAULT_SETTINGS = AssertSettings()
