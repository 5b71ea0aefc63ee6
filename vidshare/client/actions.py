"""
Actions dispatched to the store.

Every async operation goes through ``Pending`` and then exactly one of
``Fulfilled`` or ``Rejected``. ``Command`` carries synchronous slice actions
such as ``clear_error``.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Pending:
    slice: str
    op: str


@dataclass(frozen=True)
class Fulfilled:
    slice: str
    op: str
    payload: Any = None


@dataclass(frozen=True)
class Rejected:
    slice: str
    op: str
    error: str


@dataclass(frozen=True)
class Command:
    slice: str
    op: str
    payload: Any = None


Action = Pending | Fulfilled | Rejected | Command
