"""Exceptions raised by the simulation core."""

from __future__ import annotations


class InvariantError(RuntimeError):
    """Internal state no longer satisfies a structural invariant.

    Raised for defects such as a snake shorter than two segments. It is
    never part of normal play and is not caught by the core.
    """
