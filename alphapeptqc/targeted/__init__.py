"""Targeted experiment definitions (transition reference tables)."""

from .transitions import (
    Transition,
    TransitionReference,
)

__all__ = [
    'Transition',
    'TransitionReference',
]
