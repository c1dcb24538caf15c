"""
Two-level QC filter for targeted feature groups.

Evaluates every feature group (transition group) and each of its
sub-features (transitions) against name-matched QC criteria and either flags
or removes the failures.

Checks per feature group (for each matching GroupCriteria):
- Retention time, intensity and overall quality of the group
- Heavy/light label counts and quantifying/identifying/detecting/total
  transition counts
- Ion ratio for every ordered sub-feature pair matching the configured names
- Meta-value criteria on the group (only counted when the key exists)

Checks per sub-feature (for each matching SubFeatureCriteria):
- Retention time, intensity and overall quality
- Meta-value criteria (only counted when the key exists)

Group checks run once per sub-feature, so a group with S sub-features
accumulates its group tests and failures S times. The QC score is
1 - failures / tests, or 1.0 when nothing was tested.

Modes:
- flag: annotate pass/fail and failure reasons, remove nothing
- filter: drop failing sub-features, and groups that fail or lose all
  their sub-features
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ..constants import (
    QC_TRANSITION_GROUP_MESSAGE,
    QC_TRANSITION_GROUP_PASS,
    QC_TRANSITION_GROUP_SCORE,
    QC_TRANSITION_MESSAGE,
    QC_TRANSITION_PASS,
    QC_TRANSITION_SCORE,
)
from ..exceptions import MissingInformationError
from ..features.feature_group import FeatureGroup, SubFeature
from ..targeted.transitions import TransitionReference
from .bounds_estimation import estimate_criteria_bounds
from .criteria import GroupCriteria, QCCriteria, SubFeatureCriteria
from .ion_ratio import calculate_ion_ratio
from .label_counting import count_labels_and_transition_types

logger = logging.getLogger(__name__)


class FilterMode(Enum):
    """What to do with features that fail QC."""
    FLAG = "flag"      # Annotate, keep everything
    FILTER = "filter"  # Remove failing features


class FailureReason(str, Enum):
    """Fixed failure reason tokens.

    Meta-value failures use the meta-value key itself and ion ratio failures
    use 'ion_ratio_pair[<name_1>/<name_2>]'.
    """
    RETENTION_TIME = "retention_time"
    INTENSITY = "intensity"
    OVERALL_QUALITY = "overall_quality"
    N_HEAVY = "n_heavy"
    N_LIGHT = "n_light"
    N_DETECTING = "n_detecting"
    N_QUANTIFYING = "n_quantifying"
    N_IDENTIFYING = "n_identifying"
    N_TRANSITIONS = "n_transitions"


@dataclass
class FeatureFilterParams:
    """Parameters for the QC feature filter."""

    mode: FilterMode = FilterMode.FLAG

    def __post_init__(self):
        if isinstance(self.mode, str):
            try:
                self.mode = FilterMode(self.mode)
            except ValueError:
                raise ValueError(
                    f"Unknown filter mode: {self.mode}. Use 'flag' or 'filter'."
                ) from None
        elif not isinstance(self.mode, FilterMode):
            raise ValueError(f"Unknown filter mode: {self.mode}")

    @classmethod
    def from_dict(cls, params: Mapping[str, Any]) -> 'FeatureFilterParams':
        """Create parameters from a plain mapping.

        Accepts 'mode' or its legacy alias 'flag_or_filter'.

        Args:
            params: Parameter mapping, e.g. {"flag_or_filter": "filter"}

        Returns:
            FeatureFilterParams
        """
        aliases = {"flag_or_filter": "mode", "mode": "mode"}
        kwargs = {}
        for key, value in params.items():
            if key not in aliases:
                raise ValueError(f"Unknown feature filter parameter: {key}")
            kwargs[aliases[key]] = value
        return cls(**kwargs)


def unique_sorted(messages: Sequence[str]) -> List[str]:
    """Sort and de-duplicate failure messages."""
    return sorted(set(messages))


@dataclass
class QCResult:
    """QC outcome for one feature group or sub-feature.

    n_failures counts every failed check, including repeats, and drives the
    score; failure_reasons is the sorted unique list for reporting.
    """

    n_tests: int = 0
    failures: List[str] = field(default_factory=list)

    @property
    def n_failures(self) -> int:
        return len(self.failures)

    @property
    def passed(self) -> bool:
        return not self.failures

    @property
    def score(self) -> float:
        if self.n_tests == 0:
            return 1.0
        return 1.0 - self.n_failures / self.n_tests

    @property
    def failure_reasons(self) -> List[str]:
        return unique_sorted(self.failures)

    def add(self, passed: bool, reason: str, counted: bool = True) -> None:
        if not passed:
            self.failures.append(reason)
        if counted:
            self.n_tests += 1


@dataclass
class GroupQCResult:
    """QC outcome of a feature group and its sub-features."""

    peptide_ref: str
    group: QCResult
    sub_features: List[QCResult] = field(default_factory=list)


def _check_group_criteria(
    result: QCResult,
    group: FeatureGroup,
    sub_feature: SubFeature,
    criteria: GroupCriteria,
    counts: Dict[str, int],
) -> None:
    result.add(criteria.retention_time.in_range(group.rt), FailureReason.RETENTION_TIME.value)
    result.add(criteria.intensity.in_range(group.intensity), FailureReason.INTENSITY.value)
    result.add(
        criteria.overall_quality.in_range(group.overall_quality),
        FailureReason.OVERALL_QUALITY.value,
    )
    for count_name, criterion in criteria.count_criteria():
        result.add(criterion.in_range(counts[count_name]), count_name)

    # All ordered pairs, including the sub-feature with itself
    ion_ratio = criteria.ion_ratio
    for sub_feature_2 in group.sub_features:
        if ion_ratio.matches(sub_feature.native_id, sub_feature_2.native_id):
            ratio = calculate_ion_ratio(sub_feature, sub_feature_2, ion_ratio.feature_name)
            result.add(ion_ratio.bounds.in_range(ratio), ion_ratio.failure_reason)

    for meta_value_criterion in criteria.iter_meta_value_criteria():
        passed, exists = meta_value_criterion.check(group)
        result.add(passed, meta_value_criterion.key, counted=exists)


def _check_sub_feature_criteria(
    result: QCResult,
    sub_feature: SubFeature,
    criteria: SubFeatureCriteria,
) -> None:
    result.add(criteria.retention_time.in_range(sub_feature.rt), FailureReason.RETENTION_TIME.value)
    result.add(criteria.intensity.in_range(sub_feature.intensity), FailureReason.INTENSITY.value)
    result.add(
        criteria.overall_quality.in_range(sub_feature.overall_quality),
        FailureReason.OVERALL_QUALITY.value,
    )

    for meta_value_criterion in criteria.iter_meta_value_criteria():
        passed, exists = meta_value_criterion.check(sub_feature)
        result.add(passed, meta_value_criterion.key, counted=exists)


class FeatureFilter:
    """QC filter for feature groups and their sub-features.

    Parameters
    ----------
    params : FeatureFilterParams, optional
        Filter parameters (default: flag mode)
    mode : str or FilterMode, optional
        Shortcut for FeatureFilterParams(mode=mode)

    Examples
    --------
    >>> qc_filter = FeatureFilter(mode="filter")
    >>> kept = qc_filter.apply(groups, criteria, transitions)
    >>> print(f"Kept {len(kept)} of {len(groups)} transition groups")
    """

    def __init__(
        self,
        params: Optional[FeatureFilterParams] = None,
        mode: Optional[Union[str, FilterMode]] = None,
    ):
        if params is None:
            params = FeatureFilterParams() if mode is None else FeatureFilterParams(mode=mode)
        elif mode is not None:
            raise ValueError("Pass either params or mode, not both.")
        self.params = params

    @property
    def mode(self) -> FilterMode:
        return self.params.mode

    def evaluate_group(
        self,
        group: FeatureGroup,
        criteria: QCCriteria,
        transitions: Optional[TransitionReference] = None,
    ) -> GroupQCResult:
        """Run all QC checks for one feature group without modifying it.

        Args:
            group: Feature group to evaluate
            criteria: QC criteria set
            transitions: Transition reference table for label/type counts

        Returns:
            GroupQCResult with one QCResult per sub-feature
        """
        counts = count_labels_and_transition_types(group, transitions)
        group_criteria = criteria.group_criteria_for(group.peptide_ref)

        group_result = QCResult()
        sub_feature_results = []

        for sub_feature in group.sub_features:
            for criteria_entry in group_criteria:
                _check_group_criteria(group_result, group, sub_feature, criteria_entry, counts)

            sub_feature_result = QCResult()
            for criteria_entry in criteria.sub_feature_criteria_for(sub_feature.native_id):
                _check_sub_feature_criteria(sub_feature_result, sub_feature, criteria_entry)
            sub_feature_results.append(sub_feature_result)

        return GroupQCResult(
            peptide_ref=group.peptide_ref,
            group=group_result,
            sub_features=sub_feature_results,
        )

    def evaluate(
        self,
        groups: Sequence[FeatureGroup],
        criteria: Optional[QCCriteria],
        transitions: Optional[TransitionReference] = None,
    ) -> List[GroupQCResult]:
        """Run all QC checks for a collection of feature groups.

        Unlike apply(), nothing is annotated or removed.

        Args:
            groups: Feature groups
            criteria: QC criteria set
            transitions: Transition reference table

        Returns:
            One GroupQCResult per feature group, in input order

        Raises:
            MissingInformationError: If criteria is None
        """
        if criteria is None:
            raise MissingInformationError("No QC criteria provided.")
        return [self.evaluate_group(group, criteria, transitions) for group in groups]

    def apply(
        self,
        groups: Sequence[FeatureGroup],
        criteria: Optional[QCCriteria],
        transitions: Optional[TransitionReference] = None,
    ) -> List[FeatureGroup]:
        """Flag or filter feature groups and sub-features failing QC.

        QC scores are written to every evaluated group and sub-feature in both
        modes. In flag mode, pass/fail and the sorted unique failure reasons
        are written as well and the input groups are returned. In filter mode,
        failing sub-features are dropped and a group is kept only if it passes
        and at least one of its sub-features survived; kept groups are
        returned as copies holding the surviving sub-features.

        Args:
            groups: Feature groups (annotated in place)
            criteria: QC criteria set
            transitions: Transition reference table

        Returns:
            Flagged or filtered list of feature groups

        Raises:
            MissingInformationError: If criteria is None
        """
        logger.info(
            f"Running QC on {len(groups):,} transition groups (mode: {self.mode.value})..."
        )
        results = self.evaluate(groups, criteria, transitions)
        is_filter = self.mode == FilterMode.FILTER

        output = []
        n_groups_passed = 0
        for group, result in zip(groups, results):
            kept_sub_features = []
            for sub_feature, sub_result in zip(group.sub_features, result.sub_features):
                sub_feature.set_meta_value(QC_TRANSITION_SCORE, sub_result.score)
                if is_filter:
                    if sub_result.passed:
                        kept_sub_features.append(sub_feature)
                else:
                    sub_feature.set_meta_value(QC_TRANSITION_PASS, sub_result.passed)
                    sub_feature.set_meta_value(QC_TRANSITION_MESSAGE, sub_result.failure_reasons)

            group.set_meta_value(QC_TRANSITION_GROUP_SCORE, result.group.score)
            if result.group.passed:
                n_groups_passed += 1

            if is_filter:
                if result.group.passed and kept_sub_features:
                    output.append(dataclasses.replace(
                        group,
                        sub_features=kept_sub_features,
                        meta_values=dict(group.meta_values),
                    ))
            else:
                group.set_meta_value(QC_TRANSITION_GROUP_PASS, result.group.passed)
                group.set_meta_value(QC_TRANSITION_GROUP_MESSAGE, result.group.failure_reasons)
                output.append(group)

        if is_filter:
            logger.info(f"✓ Kept {len(output):,} of {len(groups):,} transition groups")
        else:
            logger.info(
                f"✓ Flagged {len(groups):,} transition groups "
                f"({n_groups_passed:,} passed QC)"
            )

        return output

    def estimate_default_criteria(
        self,
        samples: Sequence[Sequence[FeatureGroup]],
        template: QCCriteria,
        transitions: Optional[TransitionReference] = None,
    ) -> QCCriteria:
        """Widen the template's bounds to cover all samples.

        See estimate_criteria_bounds().
        """
        return estimate_criteria_bounds(samples, template, transitions)


def filter_feature_groups(
    groups: Sequence[FeatureGroup],
    criteria: QCCriteria,
    transitions: Optional[TransitionReference] = None,
    mode: Union[str, FilterMode] = FilterMode.FLAG,
) -> List[FeatureGroup]:
    """Flag or filter feature groups in one call.

    Args:
        groups: Feature groups
        criteria: QC criteria set
        transitions: Transition reference table
        mode: 'flag' (default) or 'filter'

    Returns:
        Flagged or filtered list of feature groups
    """
    return FeatureFilter(mode=mode).apply(groups, criteria, transitions)
