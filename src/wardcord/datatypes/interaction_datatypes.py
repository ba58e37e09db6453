"""
Outcome of checking whether one member may act on another.

A check ends in exactly one of three ways:

- ``Allowed``: the action may go ahead.
- ``Denied``: policy refuses it; ``reason`` is shown to the invoker and the
  action must not be applied. This is an ordinary result, not a fault.
- ``Failed``: the data needed to decide could not be obtained; ``error``
  aborts the whole operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class Allowed:
    pass


@dataclass(frozen=True, slots=True)
class Denied:
    reason: str


@dataclass(frozen=True, slots=True)
class Failed:
    error: Exception


InteractionCheck = Union[Allowed, Denied, Failed]

ALLOWED = Allowed()
