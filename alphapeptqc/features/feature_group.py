"""
Feature groups and their transition sub-features.

A FeatureGroup is one detected analyte (transition group). It owns an ordered
list of SubFeature objects, one per measured transition. Both carry an open
string-keyed annotation store ("meta-values") used by upstream detection to
attach scores and by the QC filter to write its results.

Meta-values are restricted to numbers, booleans, strings and lists. Lookups
of absent keys raise unless a default is given; use meta_value_exists() to
test first.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import numpy as np

MetaValue = Union[int, float, bool, str, list]

_MISSING = object()


def is_valid_meta_value(value: Any) -> bool:
    """Return True if value can be stored as a meta-value."""
    return isinstance(value, (bool, int, float, str, list, tuple, np.number, np.bool_))


class MetaValueMixin:
    """Meta-value access for classes with a ``meta_values`` dict."""

    meta_values: Dict[str, MetaValue]

    def get_meta_value(self, key: str, default: Any = _MISSING) -> MetaValue:
        """Get the meta-value stored under key.

        Args:
            key: Annotation key
            default: Returned when key is absent. If omitted, KeyError is raised.

        Returns:
            The stored value
        """
        if key in self.meta_values:
            return self.meta_values[key]
        if default is _MISSING:
            raise KeyError(f"No meta-value '{key}'")
        return default

    def set_meta_value(self, key: str, value: MetaValue) -> None:
        """Set (or overwrite) the meta-value stored under key."""
        if not is_valid_meta_value(value):
            raise TypeError(
                f"Unsupported meta-value type for '{key}': {type(value).__name__}"
            )
        if isinstance(value, tuple):
            value = list(value)
        self.meta_values[key] = value

    def meta_value_exists(self, key: str) -> bool:
        return key in self.meta_values

    def remove_meta_value(self, key: str) -> None:
        self.meta_values.pop(key, None)

    def meta_keys(self) -> List[str]:
        return list(self.meta_values)


@dataclass
class SubFeature(MetaValueMixin):
    """One measured transition of a feature group."""

    native_id: Optional[str] = None
    rt: float = 0.0
    intensity: float = 0.0
    overall_quality: float = 0.0
    label_type: Optional[str] = None  # 'Heavy', 'Light', or None
    meta_values: Dict[str, MetaValue] = field(default_factory=dict)


@dataclass
class FeatureGroup(MetaValueMixin):
    """A detected analyte and its transition sub-features.

    The identity key (peptide_ref) is what group-level QC criteria are
    matched against; it must not change during a QC pass.
    """

    peptide_ref: str
    rt: float = 0.0
    intensity: float = 0.0
    overall_quality: float = 0.0
    sub_features: List[SubFeature] = field(default_factory=list)
    meta_values: Dict[str, MetaValue] = field(default_factory=dict)

    @property
    def n_sub_features(self) -> int:
        return len(self.sub_features)

    def get_sub_feature(self, native_id: str) -> Optional[SubFeature]:
        """Return the first sub-feature with the given native id, or None."""
        for sub_feature in self.sub_features:
            if sub_feature.native_id == native_id:
                return sub_feature
        return None
