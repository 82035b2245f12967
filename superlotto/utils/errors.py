"""
superlotto/utils/errors.py
Exception types raised by the prediction engine.
"""
from __future__ import annotations

from collections.abc import Iterable


class LotteryEngineError(Exception):
    """Base class for engine errors."""


class InvalidDrawError(LotteryEngineError, ValueError):
    """A draw or combination does not have the expected shape."""


class InsufficientHistoryError(LotteryEngineError):
    """
    Raised inside a strategy when the history snapshot is too short.
    Strategies catch it themselves and fall back; it never reaches callers.
    """

    def __init__(self, method_code: str, required: int, available: int):
        self.method_code = method_code
        self.required = required
        self.available = available
        super().__init__(
            f"{method_code} needs at least {required} draws, got {available}"
        )


class UnknownMethodError(LotteryEngineError, ValueError):
    def __init__(self, code: str, valid_codes: Iterable[str]):
        self.code = code
        self.valid_codes = list(valid_codes)
        super().__init__(
            f"Unknown prediction method: {code!r}. Valid methods: {', '.join(self.valid_codes)}"
        )


class DrawNotResolvedError(LotteryEngineError, LookupError):
    """No draw has been recorded yet for the requested issue."""

    def __init__(self, issue: str):
        self.issue = issue
        super().__init__(f"Draw for issue {issue} is not available yet; cannot verify.")
