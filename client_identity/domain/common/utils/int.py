"""Numeric Utilities Module"""

from typing import Any


class IntUtils:
    @staticmethod
    def to_int(value: Any, default: int | None = None) -> int | None:
        try:
            return int(float(value))
        except (OverflowError, TypeError, ValueError):
            return default
