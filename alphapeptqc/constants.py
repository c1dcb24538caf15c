"""Annotation keys, label tags and default criterion bounds for feature QC.

This module collects every string token and numeric default shared by the
QC filter, the bounds estimator and the summary helpers, so that annotations
written by one component can be read back by another without typos.

Key Features
------------
- Annotation keys written onto feature groups and sub-features
- Label-type tags recognised by the label counter
- Default (wide-open) bounds for float and count criteria
"""

# =============================================================================
# Annotation Keys (written by the QC filter)
# =============================================================================

# Sub-feature (transition) level
QC_TRANSITION_SCORE = "QC_transition_score"
QC_TRANSITION_PASS = "QC_transition_pass"
QC_TRANSITION_MESSAGE = "QC_transition_message"

# Feature group (transition group) level
QC_TRANSITION_GROUP_SCORE = "QC_transition_group_score"
QC_TRANSITION_GROUP_PASS = "QC_transition_group_pass"
QC_TRANSITION_GROUP_MESSAGE = "QC_transition_group_message"

# =============================================================================
# Label Types
# =============================================================================

# Exact, case-sensitive tags; anything else counts as neither
LABEL_HEAVY = "Heavy"
LABEL_LIGHT = "Light"

# =============================================================================
# Ion Ratio
# =============================================================================

# Selector token that compares sub-feature intensities instead of a meta-value
ION_RATIO_INTENSITY = "intensity"

# =============================================================================
# Default Criterion Bounds
# =============================================================================

# Float criteria (retention time, intensity, quality, ion ratio, meta-values)
DEFAULT_LOWER_BOUND = 0.0
DEFAULT_UPPER_BOUND = 1e12

# Count criteria (labels and transition types)
DEFAULT_COUNT_LOWER_BOUND = 0
DEFAULT_COUNT_UPPER_BOUND = 100

# Names of the six per-group counts, in reporting order
COUNT_NAMES = (
    "n_heavy",
    "n_light",
    "n_quantifying",
    "n_identifying",
    "n_detecting",
    "n_transitions",
)
