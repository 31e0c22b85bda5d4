"""Process terminators.

Two strategies satisfy the :class:`~lib_fatal_assert.application.ports.Terminator`
port:

* :func:`exit_process` ends the interpreter immediately via :func:`os._exit`.
  ``finally`` blocks, ``atexit`` hooks and ``except BaseException`` clauses in
  the caller cannot intercept it, so the failing call site never resumes.
  Standard streams are flushed first because ``os._exit`` skips that step.
* :func:`raise_system_exit` raises :class:`SystemExit`. Used by the CLI so the
  exit code travels through ``lib_cli_exit_tools``.
"""

from __future__ import annotations

import os
import sys
from typing import NoReturn


def exit_process(exit_code: int) -> NoReturn:
    """Flush ``stdout``/``stderr`` and terminate with *exit_code*."""

    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            # closed or broken stream; the report has already been written
            pass
    os._exit(exit_code)


def raise_system_exit(exit_code: int) -> NoReturn:
    """Raise :class:`SystemExit` carrying *exit_code*."""

    raise SystemExit(exit_code)
