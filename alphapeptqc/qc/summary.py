"""Collect and summarize QC results.

Helpers for reporting after a QC run: pull the score annotations into NumPy
arrays, apply a score threshold, and condense a list of GroupQCResult into a
summary dictionary.
"""

from collections import Counter
from typing import Dict, List, Sequence

import numpy as np

from ..constants import QC_TRANSITION_GROUP_SCORE, QC_TRANSITION_SCORE
from ..features.feature_group import FeatureGroup
from .feature_filter import GroupQCResult


def collect_group_scores(groups: Sequence[FeatureGroup]) -> np.ndarray:
    """Collect group QC scores (NaN for groups that were not scored).

    Args:
        groups: Feature groups annotated by FeatureFilter.apply()

    Returns:
        Array of scores, one per group
    """
    scores = np.full(len(groups), np.nan, dtype=np.float64)
    for i, group in enumerate(groups):
        if group.meta_value_exists(QC_TRANSITION_GROUP_SCORE):
            scores[i] = group.get_meta_value(QC_TRANSITION_GROUP_SCORE)
    return scores


def collect_sub_feature_scores(groups: Sequence[FeatureGroup]) -> np.ndarray:
    """Collect sub-feature QC scores of all groups, flattened in order.

    Args:
        groups: Feature groups annotated by FeatureFilter.apply()

    Returns:
        Array of scores, one per sub-feature (NaN if not scored)
    """
    values = [
        sub_feature.get_meta_value(QC_TRANSITION_SCORE, np.nan)
        for group in groups
        for sub_feature in group.sub_features
    ]
    return np.asarray(values, dtype=np.float64)


def filter_by_qc_score(
    groups: List[FeatureGroup],
    scores: np.ndarray,
    min_score: float = 1.0,
) -> List[FeatureGroup]:
    """Keep groups whose QC score is at least min_score.

    Args:
        groups: Feature groups
        scores: Array of QC scores aligned with groups
        min_score: Minimum score (0-1). NaN scores never pass.

    Returns:
        Filtered list of feature groups
    """
    mask = scores >= min_score
    return [groups[i] for i in range(len(groups)) if mask[i]]


def summarize_qc_results(results: Sequence[GroupQCResult]) -> Dict[str, object]:
    """Summarize a QC run.

    Parameters
    ----------
    results : Sequence[GroupQCResult]
        Output of FeatureFilter.evaluate()

    Returns
    -------
    summary : dict
        n_groups, n_groups_passed, group_pass_rate, mean_group_score,
        n_sub_features, n_sub_features_passed, sub_feature_pass_rate,
        mean_sub_feature_score, failure_counts. Rates and means are NaN
        when there is nothing to average. failure_counts maps each failure
        reason to the number of groups and sub-features that carry it.
    """
    group_scores = np.array([result.group.score for result in results], dtype=np.float64)
    group_passed = np.array([result.group.passed for result in results], dtype=bool)

    sub_results = [sub for result in results for sub in result.sub_features]
    sub_scores = np.array([sub.score for sub in sub_results], dtype=np.float64)
    sub_passed = np.array([sub.passed for sub in sub_results], dtype=bool)

    failure_counts = Counter()
    for result in results:
        failure_counts.update(result.group.failure_reasons)
    for sub in sub_results:
        failure_counts.update(sub.failure_reasons)

    return {
        "n_groups": len(results),
        "n_groups_passed": int(group_passed.sum()),
        "group_pass_rate": float(group_passed.mean()) if len(results) else np.nan,
        "mean_group_score": float(group_scores.mean()) if len(results) else np.nan,
        "n_sub_features": len(sub_results),
        "n_sub_features_passed": int(sub_passed.sum()),
        "sub_feature_pass_rate": float(sub_passed.mean()) if sub_results else np.nan,
        "mean_sub_feature_score": float(sub_scores.mean()) if sub_results else np.nan,
        "failure_counts": dict(failure_counts),
    }
