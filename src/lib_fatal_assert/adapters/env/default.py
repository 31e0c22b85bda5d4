"""Environment variable adapter for assertion settings.

Purpose
-------
Let operators adjust :class:`~lib_fatal_assert.domain.settings.AssertSettings`
without code changes, e.g. to pick a distinctive exit status for supervisors.

Key behaviours
--------------
* Only variables carrying the prefix (``LIB_FATAL_ASSERT_`` by default) are read.
* Recognised names: ``ENABLED``, ``EXIT_CODE``, ``CAPTURE_STACK``
  (case-insensitive after the prefix); others are ignored.
* Values get light coercion (``true``/``false``, integers) before validation.
* Emits a structured ``settings_loaded`` event.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...domain.errors import InvalidSetting
from ...domain.settings import AssertSettings
from ...observability import log_debug, make_event

_FIELDS = {"enabled": bool, "exit_code": int, "capture_stack": bool}


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-fatal-assert')
    'LIB_FATAL_ASSERT'
    """

    return slug.replace("-", "_").upper()


DEFAULT_PREFIX = default_env_prefix("lib-fatal-assert")


class EnvSettingsLoader:
    """Build :class:`AssertSettings` from prefixed environment variables."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability."""

        self._environ = environ if environ is not None else os.environ

    def load(self, prefix: str = DEFAULT_PREFIX, *, base: AssertSettings | None = None) -> AssertSettings:
        """Return *base* (or defaults) overridden by matching variables.

        Raises
        ------
        InvalidSetting
            When a recognised variable holds a value of the wrong type or the
            resulting settings are invalid (e.g. ``EXIT_CODE=0``).

        Examples
        --------
        >>> loader = EnvSettingsLoader(environ={'DEMO_EXIT_CODE': '3', 'DEMO_ENABLED': 'false'})
        >>> settings = loader.load('DEMO')
        >>> settings.exit_code, settings.enabled
        (3, False)
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        overrides: dict[str, object] = {}
        for key, raw in self._environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix) :].lower()
            expected = _FIELDS.get(name)
            if expected is None:
                continue
            overrides[name] = _validate(key, _coerce(raw), expected)
        settings = (base or AssertSettings()).with_overrides(**overrides)
        log_debug("settings_loaded", **make_event("settings", None, {"overrides": sorted(overrides)}))
        return settings


def _validate(key: str, value: object, expected: type) -> object:
    if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
        raise InvalidSetting(f"{key} must be an integer, got {value!r}")
    if expected is bool and not isinstance(value, bool):
        raise InvalidSetting(f"{key} must be true or false, got {value!r}")
    return value


def _coerce(value: str) -> object:
    """Coerce textual environment values to Python primitives where possible.

    Examples
    --------
    >>> _coerce('true'), _coerce('10'), _coerce('-2'), _coerce('hello')
    (True, 10, -2, 'hello')
    """

    stripped = value.strip()
    lowered = stripped.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if stripped.isdigit() or (stripped.startswith("-") and stripped[1:].isdigit()):
        return int(stripped)
    return stripped
