"""Label and transition-type counting for feature groups.

Cross-references each sub-feature of a group against the transition
reference table and counts heavy/light labels, quantifying / identifying /
detecting transitions and the total number of transitions.
"""

import logging
from typing import Dict, Optional

from ..constants import COUNT_NAMES, LABEL_HEAVY, LABEL_LIGHT
from ..features.feature_group import FeatureGroup
from ..targeted.transitions import TransitionReference

logger = logging.getLogger(__name__)


def count_labels_and_transition_types(
    group: FeatureGroup,
    transitions: Optional[TransitionReference] = None,
) -> Dict[str, int]:
    """Count labels and transition types of a feature group.

    Sub-features without a matching transition contribute to the label and
    total counts only. Label tags are matched exactly ('Heavy', 'Light').

    Parameters
    ----------
    group : FeatureGroup
        Feature group whose sub-features are counted
    transitions : TransitionReference, optional
        Transition reference table. None behaves like an empty table.

    Returns
    -------
    counts : Dict[str, int]
        Keys n_heavy, n_light, n_quantifying, n_identifying, n_detecting,
        n_transitions

    Examples
    --------
    >>> counts = count_labels_and_transition_types(group, reference)
    >>> counts["n_transitions"] == len(group.sub_features)
    True
    """
    counts = dict.fromkeys(COUNT_NAMES, 0)

    for sub_feature in group.sub_features:
        transition = None
        if transitions is not None:
            transition = transitions.find_by_native_id(sub_feature.native_id)
        if transition is None:
            logger.debug(
                f"No transition found for {sub_feature.native_id} "
                f"in transition group {group.peptide_ref}."
            )

        if sub_feature.label_type == LABEL_HEAVY:
            counts["n_heavy"] += 1
        elif sub_feature.label_type == LABEL_LIGHT:
            counts["n_light"] += 1

        if transition is not None:
            if transition.is_quantifying:
                counts["n_quantifying"] += 1
            if transition.is_identifying:
                counts["n_identifying"] += 1
            if transition.is_detecting:
                counts["n_detecting"] += 1

        counts["n_transitions"] += 1

    return counts
