"""Process terminators."""

from .default import exit_process, raise_system_exit

__all__ = ["exit_process", "raise_system_exit"]
