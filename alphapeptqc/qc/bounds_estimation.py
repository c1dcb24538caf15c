"""Estimate QC criteria bounds from known-good training runs.

Mirrors the traversal of the QC feature filter (sample -> feature group ->
sub-feature -> matching criteria -> ordered sub-feature pairs for ion
ratios), but widens every matched RangeCriterion to cover the observed value
instead of testing it. One template accumulates bounds over all samples.

Typical use:

>>> template = QCCriteria(group_criteria=[GroupCriteria("PEPTIDE")])
>>> template.reset_bounds_for_estimation()
>>> estimate_criteria_bounds([run_1, run_2], template, transitions)
>>> template.group_criteria[0].retention_time.as_tuple()
(14.2, 15.8)
"""

import logging
from typing import Dict, Optional, Sequence

from ..exceptions import MissingInformationError
from ..features.feature_group import FeatureGroup, SubFeature
from ..targeted.transitions import TransitionReference
from .criteria import GroupCriteria, QCCriteria, SubFeatureCriteria
from .ion_ratio import calculate_ion_ratio
from .label_counting import count_labels_and_transition_types

logger = logging.getLogger(__name__)


def _expand_group_criteria(
    criteria: GroupCriteria,
    group: FeatureGroup,
    sub_feature: SubFeature,
    counts: Dict[str, int],
) -> None:
    criteria.retention_time.expand(group.rt)
    criteria.intensity.expand(group.intensity)
    criteria.overall_quality.expand(group.overall_quality)
    for count_name, criterion in criteria.count_criteria():
        criterion.expand(counts[count_name])

    ion_ratio = criteria.ion_ratio
    for sub_feature_2 in group.sub_features:
        if ion_ratio.matches(sub_feature.native_id, sub_feature_2.native_id):
            ion_ratio.bounds.expand(
                calculate_ion_ratio(sub_feature, sub_feature_2, ion_ratio.feature_name)
            )

    for meta_value_criterion in criteria.iter_meta_value_criteria():
        meta_value_criterion.expand(group)


def _expand_sub_feature_criteria(criteria: SubFeatureCriteria, sub_feature: SubFeature) -> None:
    criteria.retention_time.expand(sub_feature.rt)
    criteria.intensity.expand(sub_feature.intensity)
    criteria.overall_quality.expand(sub_feature.overall_quality)
    for meta_value_criterion in criteria.iter_meta_value_criteria():
        meta_value_criterion.expand(sub_feature)


def estimate_criteria_bounds(
    samples: Sequence[Sequence[FeatureGroup]],
    template: QCCriteria,
    transitions: Optional[TransitionReference] = None,
) -> QCCriteria:
    """Widen the bounds of a criteria template to cover all samples.

    Only criteria whose names match a feature group or sub-feature are
    touched. Meta-value bounds are only widened where the key exists.

    Parameters
    ----------
    samples : Sequence[Sequence[FeatureGroup]]
        One collection of feature groups per training run
    template : QCCriteria
        Criteria template, modified in place. Start from inverted bounds
        (see QCCriteria.reset_bounds_for_estimation) to get the tightest
        envelope of the samples.
    transitions : TransitionReference, optional
        Transition reference table for label/type counts

    Returns
    -------
    template : QCCriteria
        The same template, with updated bounds

    Raises
    ------
    MissingInformationError
        If template is None or holds no criteria
    """
    if template is None or template.is_empty:
        raise MissingInformationError("No QC criteria provided in the template.")

    if len(samples) == 0:
        logger.warning("No samples provided for QC bounds estimation. Template unchanged.")
        return template

    n_groups = 0
    for sample in samples:
        for group in sample:
            n_groups += 1
            counts = count_labels_and_transition_types(group, transitions)
            group_criteria = template.group_criteria_for(group.peptide_ref)

            for sub_feature in group.sub_features:
                for criteria in group_criteria:
                    _expand_group_criteria(criteria, group, sub_feature, counts)
                for criteria in template.sub_feature_criteria_for(sub_feature.native_id):
                    _expand_sub_feature_criteria(criteria, sub_feature)

    logger.info(
        f"✓ Estimated QC bounds from {len(samples):,} samples "
        f"({n_groups:,} transition groups)"
    )

    return template
