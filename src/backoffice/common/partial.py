"""Tri-state field values for partial updates.

A field on an update struct is either ``UNSET`` (leave the stored value alone),
``None`` (clear it) or a concrete value.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T")


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


def pick(value: Any, current: T) -> T:
    return current if value is UNSET else value
