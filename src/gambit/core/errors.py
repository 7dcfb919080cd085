"""Exceptions raised by the rules engine."""

from __future__ import annotations


class FormatError(ValueError):
    """Malformed position text (FEN)."""

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(message if text is None else f"{message}: {text!r}")
        self.text = text
