"""Ion ratio between two sub-features of a feature group.

The ratio uses either the sub-feature intensities or a named meta-value.
Missing partners degrade instead of raising:

- both present: a / b
- only the first present: a (no internal standard)
- otherwise: 0.0

Division by zero follows IEEE semantics (inf or nan) and is passed through
unchanged; range checks then reject the result.
"""

import logging

import numpy as np

from ..constants import ION_RATIO_INTENSITY
from ..features.feature_group import SubFeature
from .criteria import meta_value_as_float

logger = logging.getLogger(__name__)


def _divide(numerator: float, denominator: float) -> float:
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = float(np.float64(numerator) / np.float64(denominator))
    if not np.isfinite(ratio):
        logger.debug(f"Ion ratio {numerator} / {denominator} is not finite ({ratio}).")
    return ratio


def calculate_ion_ratio(
    sub_feature_1: SubFeature,
    sub_feature_2: SubFeature,
    feature_name: str = ION_RATIO_INTENSITY,
) -> float:
    """Calculate the ion ratio between two sub-features.

    Args:
        sub_feature_1: Numerator sub-feature
        sub_feature_2: Denominator sub-feature (typically the internal standard)
        feature_name: "intensity" or the meta-value key to compare

    Returns:
        Ion ratio, 0.0 if it cannot be computed
    """
    if feature_name == ION_RATIO_INTENSITY:
        has_1 = sub_feature_1.native_id is not None
        has_2 = sub_feature_2.native_id is not None
        if has_1 and has_2:
            return _divide(sub_feature_1.intensity, sub_feature_2.intensity)
        if has_1:
            logger.debug(f"No internal standard found for component {sub_feature_1.native_id}.")
            return float(sub_feature_1.intensity)
        return 0.0

    has_1 = sub_feature_1.meta_value_exists(feature_name)
    has_2 = sub_feature_2.meta_value_exists(feature_name)
    if has_1 and has_2:
        return _divide(
            meta_value_as_float(feature_name, sub_feature_1.get_meta_value(feature_name)),
            meta_value_as_float(feature_name, sub_feature_2.get_meta_value(feature_name)),
        )
    if has_1:
        logger.debug(f"No internal standard found for component {sub_feature_1.native_id}.")
        return meta_value_as_float(feature_name, sub_feature_1.get_meta_value(feature_name))

    logger.debug(
        f"Meta-value {feature_name} not found for components "
        f"{sub_feature_1.native_id} and {sub_feature_2.native_id}."
    )
    return 0.0
