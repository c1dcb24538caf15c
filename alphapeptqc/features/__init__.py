"""Feature data model for targeted (MRM/PRM) QC.

This module provides:
- FeatureGroup: a detected analyte with its transition sub-features
- SubFeature: a single measured transition
- Meta-value annotation store shared by both
"""

from .feature_group import (
    FeatureGroup,
    MetaValue,
    MetaValueMixin,
    SubFeature,
    is_valid_meta_value,
)

__all__ = [
    'FeatureGroup',
    'SubFeature',
    'MetaValue',
    'MetaValueMixin',
    'is_valid_meta_value',
]
