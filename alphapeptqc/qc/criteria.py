"""
QC acceptance criteria for feature groups and sub-features.

Criteria are plain, mutable dataclasses supplied by the caller:

- RangeCriterion: inclusive (lower, upper) bound, the atomic unit of every rule
- MetaValueCriterion: a meta-value key tested against a RangeCriterion
- IonRatioCriterion: ratio between two named sub-features
- GroupCriteria: all criteria for one feature group (transition group)
- SubFeatureCriteria: all criteria for one sub-feature (transition)
- QCCriteria: the complete criteria set, matched to features by name

The filter only reads criteria; the bounds estimator widens them in place.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from ..constants import (
    DEFAULT_COUNT_LOWER_BOUND,
    DEFAULT_COUNT_UPPER_BOUND,
    DEFAULT_LOWER_BOUND,
    DEFAULT_UPPER_BOUND,
    ION_RATIO_INTENSITY,
)
from ..exceptions import InvalidMetaValueError
from ..features.feature_group import MetaValueMixin
from .range_checks import check_range, update_range

logger = logging.getLogger(__name__)


def meta_value_as_float(key: str, value) -> float:
    """Convert a stored meta-value to float for range comparison.

    Args:
        key: Meta-value key (for the error message)
        value: Stored meta-value

    Returns:
        Value as float

    Raises:
        InvalidMetaValueError: If value is a string, list or other non-number
    """
    if isinstance(value, (bool, int, float, np.number, np.bool_)):
        return float(value)
    raise InvalidMetaValueError(key, value)


@dataclass
class RangeCriterion:
    """Inclusive numeric bound.

    lower <= upper is not enforced: an inverted bound rejects every value,
    and is the natural starting point for bounds estimation.
    """

    lower: float = DEFAULT_LOWER_BOUND
    upper: float = DEFAULT_UPPER_BOUND

    def in_range(self, value) -> bool:
        return bool(check_range(value, self.lower, self.upper))

    def expand(self, value) -> None:
        """Widen the bound so that it contains value."""
        self.lower, self.upper = update_range(value, self.lower, self.upper)

    def reset(self) -> None:
        """Set the bound to the empty envelope (inf, -inf)."""
        self.lower = np.inf
        self.upper = -np.inf

    def as_tuple(self) -> Tuple[float, float]:
        return self.lower, self.upper


def _count_range() -> RangeCriterion:
    return RangeCriterion(DEFAULT_COUNT_LOWER_BOUND, DEFAULT_COUNT_UPPER_BOUND)


@dataclass
class MetaValueCriterion:
    """Range check on an arbitrary meta-value annotation.

    Absent keys pass vacuously and report exists=False, so that optional
    annotations do not count toward the QC score.
    """

    key: str
    bounds: RangeCriterion = field(default_factory=RangeCriterion)

    def check(self, item: MetaValueMixin) -> Tuple[bool, bool]:
        """Test item's meta-value against the bounds.

        Args:
            item: FeatureGroup or SubFeature

        Returns:
            Tuple of (passed, exists)
        """
        if not item.meta_value_exists(self.key):
            logger.debug(
                f"No meta-value '{self.key}' found for {_describe(item)}; "
                "check skipped."
            )
            return True, False
        value = meta_value_as_float(self.key, item.get_meta_value(self.key))
        return self.bounds.in_range(value), True

    def expand(self, item: MetaValueMixin) -> bool:
        """Widen the bounds with item's meta-value.

        Returns:
            True if the key existed on item
        """
        if not item.meta_value_exists(self.key):
            logger.debug(
                f"No meta-value '{self.key}' found for {_describe(item)}; "
                "bounds unchanged."
            )
            return False
        self.bounds.expand(meta_value_as_float(self.key, item.get_meta_value(self.key)))
        return True


@dataclass
class IonRatioCriterion:
    """Ratio of a numeric attribute between two named sub-features.

    feature_name is either "intensity" or a meta-value key. The criterion is
    only active when both pair names are non-empty.
    """

    pair_name_1: str = ""
    pair_name_2: str = ""
    feature_name: str = ION_RATIO_INTENSITY
    bounds: RangeCriterion = field(default_factory=RangeCriterion)

    @property
    def is_configured(self) -> bool:
        return self.pair_name_1 != "" and self.pair_name_2 != ""

    def matches(self, name_1: Optional[str], name_2: Optional[str]) -> bool:
        return (
            self.is_configured
            and self.pair_name_1 == name_1
            and self.pair_name_2 == name_2
        )

    @property
    def failure_reason(self) -> str:
        return f"ion_ratio_pair[{self.pair_name_1}/{self.pair_name_2}]"


def _iter_meta_value_criteria(
    meta_value_criteria: Dict[str, RangeCriterion],
) -> Iterator[MetaValueCriterion]:
    # Sorted by key so that evaluation order does not depend on insertion order
    for key in sorted(meta_value_criteria):
        yield MetaValueCriterion(key, meta_value_criteria[key])


@dataclass
class GroupCriteria:
    """Criteria for one feature group, matched by component_group_name."""

    component_group_name: str
    retention_time: RangeCriterion = field(default_factory=RangeCriterion)
    intensity: RangeCriterion = field(default_factory=RangeCriterion)
    overall_quality: RangeCriterion = field(default_factory=RangeCriterion)

    # Label and transition type counts
    n_heavy: RangeCriterion = field(default_factory=_count_range)
    n_light: RangeCriterion = field(default_factory=_count_range)
    n_detecting: RangeCriterion = field(default_factory=_count_range)
    n_quantifying: RangeCriterion = field(default_factory=_count_range)
    n_identifying: RangeCriterion = field(default_factory=_count_range)
    n_transitions: RangeCriterion = field(default_factory=_count_range)

    ion_ratio: IonRatioCriterion = field(default_factory=IonRatioCriterion)
    meta_value_criteria: Dict[str, RangeCriterion] = field(default_factory=dict)

    def count_criteria(self) -> List[Tuple[str, RangeCriterion]]:
        """Return (count name, criterion) pairs in evaluation order."""
        return [
            ("n_heavy", self.n_heavy),
            ("n_light", self.n_light),
            ("n_detecting", self.n_detecting),
            ("n_quantifying", self.n_quantifying),
            ("n_identifying", self.n_identifying),
            ("n_transitions", self.n_transitions),
        ]

    def iter_meta_value_criteria(self) -> Iterator[MetaValueCriterion]:
        return _iter_meta_value_criteria(self.meta_value_criteria)

    def all_ranges(self) -> List[RangeCriterion]:
        ranges = [self.retention_time, self.intensity, self.overall_quality]
        ranges += [criterion for _, criterion in self.count_criteria()]
        ranges.append(self.ion_ratio.bounds)
        ranges += list(self.meta_value_criteria.values())
        return ranges


@dataclass
class SubFeatureCriteria:
    """Criteria for one sub-feature, matched by component_name (native id)."""

    component_name: str
    retention_time: RangeCriterion = field(default_factory=RangeCriterion)
    intensity: RangeCriterion = field(default_factory=RangeCriterion)
    overall_quality: RangeCriterion = field(default_factory=RangeCriterion)
    meta_value_criteria: Dict[str, RangeCriterion] = field(default_factory=dict)

    def iter_meta_value_criteria(self) -> Iterator[MetaValueCriterion]:
        return _iter_meta_value_criteria(self.meta_value_criteria)

    def all_ranges(self) -> List[RangeCriterion]:
        ranges = [self.retention_time, self.intensity, self.overall_quality]
        ranges += list(self.meta_value_criteria.values())
        return ranges


@dataclass
class QCCriteria:
    """Complete QC criteria set.

    Several entries may share a name; every matching entry is evaluated.

    Examples
    --------
    >>> criteria = QCCriteria(
    ...     group_criteria=[
    ...         GroupCriteria("PEPTIDE", retention_time=RangeCriterion(10.0, 20.0)),
    ...     ],
    ... )
    >>> len(criteria.group_criteria_for("PEPTIDE"))
    1
    """

    group_criteria: List[GroupCriteria] = field(default_factory=list)
    sub_feature_criteria: List[SubFeatureCriteria] = field(default_factory=list)

    def group_criteria_for(self, component_group_name: str) -> List[GroupCriteria]:
        return [
            criteria for criteria in self.group_criteria
            if criteria.component_group_name == component_group_name
        ]

    def sub_feature_criteria_for(self, component_name: Optional[str]) -> List[SubFeatureCriteria]:
        if component_name is None:
            return []
        return [
            criteria for criteria in self.sub_feature_criteria
            if criteria.component_name == component_name
        ]

    @property
    def is_empty(self) -> bool:
        return not self.group_criteria and not self.sub_feature_criteria

    def reset_bounds_for_estimation(self) -> 'QCCriteria':
        """Set every bound to the empty envelope before estimation.

        Returns:
            self, for chaining
        """
        for criteria in self.group_criteria:
            for criterion in criteria.all_ranges():
                criterion.reset()
        for criteria in self.sub_feature_criteria:
            for criterion in criteria.all_ranges():
                criterion.reset()
        return self


def _describe(item) -> str:
    native_id = getattr(item, "native_id", None)
    if native_id is not None:
        return f"transition {native_id}"
    peptide_ref = getattr(item, "peptide_ref", None)
    if peptide_ref is not None:
        return f"transition group {peptide_ref}"
    return "feature"
