"""Transition reference table for targeted experiments.

Holds the static per-transition metadata (quantifying / identifying /
detecting flags) that the label counter cross-references against measured
sub-features. Transitions are indexed by native id on construction, so
lookups are O(1) instead of a scan over the whole table.

Design principles:
1. Read-only during a QC pass
2. First occurrence of a duplicated native id wins
3. Unknown ids return None, never raise
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """Static metadata of one targeted transition."""

    native_id: str
    peptide_ref: Optional[str] = None
    is_quantifying: bool = False
    is_identifying: bool = False
    is_detecting: bool = False


class TransitionReference:
    """Native-id indexed collection of transitions.

    Parameters
    ----------
    transitions : Iterable[Transition], optional
        Transitions in file order. Later duplicates of a native id are kept
        in the list but are never returned by lookups.

    Examples
    --------
    >>> reference = TransitionReference([
    ...     Transition("PEPTIDE.y5", is_quantifying=True, is_detecting=True),
    ... ])
    >>> reference.find_by_native_id("PEPTIDE.y5").is_quantifying
    True
    >>> reference.find_by_native_id("unknown") is None
    True
    """

    def __init__(self, transitions: Optional[Iterable[Transition]] = None):
        self._transitions: List[Transition] = []
        self._index: Dict[str, Transition] = {}
        for transition in transitions or []:
            self.add(transition)

    def add(self, transition: Transition) -> None:
        self._transitions.append(transition)
        if transition.native_id in self._index:
            logger.debug(
                f"Duplicate transition native_id {transition.native_id}; "
                "keeping first occurrence."
            )
            return
        self._index[transition.native_id] = transition

    def find_by_native_id(self, native_id: Optional[str]) -> Optional[Transition]:
        if native_id is None:
            return None
        return self._index.get(native_id)

    @property
    def transitions(self) -> List[Transition]:
        return list(self._transitions)

    def __len__(self) -> int:
        return len(self._transitions)

    def __iter__(self) -> Iterator[Transition]:
        return iter(self._transitions)

    def __contains__(self, native_id: object) -> bool:
        return native_id in self._index
