"""Small collaborators shared by the test modules."""

from __future__ import annotations


class Dump:
    """Diagnostic entry returning a fixed string."""

    def __init__(self, text: str) -> None:
        self.text = text

    def dump(self) -> str:
        return self.text


class CallLog:
    """Flush handler appending its name to a shared list."""

    def __init__(self, name: str, calls: list[str]) -> None:
        self.name = name
        self.calls = calls

    def flush(self) -> None:
        self.calls.append(self.name)
