"""Multi-level QC filtering for targeted feature groups.

This module provides:
- Range, meta-value and ion ratio criteria, bundled per feature group and
  per sub-feature
- Label and transition type counting against a transition reference
- A flag/filter QC engine producing per-item scores and failure reasons
- Bounds estimation from known-good training runs
- Score collection and run summaries

Examples
--------
>>> from alphapeptqc.qc import FeatureFilter, QCCriteria, GroupCriteria, RangeCriterion
>>>
>>> criteria = QCCriteria(group_criteria=[
...     GroupCriteria("PEPTIDE", retention_time=RangeCriterion(10.0, 20.0)),
... ])
>>> flagged = FeatureFilter(mode="flag").apply(groups, criteria, transitions)
"""

from .range_checks import (
    check_range,
    update_range,
)

from .criteria import (
    RangeCriterion,
    MetaValueCriterion,
    IonRatioCriterion,
    GroupCriteria,
    SubFeatureCriteria,
    QCCriteria,
    meta_value_as_float,
)

from .label_counting import (
    count_labels_and_transition_types,
)

from .ion_ratio import (
    calculate_ion_ratio,
)

from .bounds_estimation import (
    estimate_criteria_bounds,
)

from .feature_filter import (
    FilterMode,
    FailureReason,
    FeatureFilterParams,
    QCResult,
    GroupQCResult,
    FeatureFilter,
    filter_feature_groups,
    unique_sorted,
)

from .summary import (
    collect_group_scores,
    collect_sub_feature_scores,
    filter_by_qc_score,
    summarize_qc_results,
)

__all__ = [
    # Range kernels
    'check_range',
    'update_range',

    # Criteria
    'RangeCriterion',
    'MetaValueCriterion',
    'IonRatioCriterion',
    'GroupCriteria',
    'SubFeatureCriteria',
    'QCCriteria',
    'meta_value_as_float',

    # Counting and ratios
    'count_labels_and_transition_types',
    'calculate_ion_ratio',

    # Filtering
    'FilterMode',
    'FailureReason',
    'FeatureFilterParams',
    'QCResult',
    'GroupQCResult',
    'FeatureFilter',
    'filter_feature_groups',
    'unique_sorted',

    # Estimation
    'estimate_criteria_bounds',

    # Summaries
    'collect_group_scores',
    'collect_sub_feature_scores',
    'filter_by_qc_score',
    'summarize_qc_results',
]
