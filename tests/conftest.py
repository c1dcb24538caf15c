"""Pytest configuration for AlphaPeptQC tests.

This module provides common fixtures for all tests. Everything is built in
memory; no file loaders are involved.
"""

import numpy as np
import pytest

from alphapeptqc.features import FeatureGroup, SubFeature
from alphapeptqc.targeted import Transition, TransitionReference


@pytest.fixture
def transition_reference():
    """Reference with one quantifying+detecting and one identifying transition."""
    return TransitionReference([
        Transition("PEPTIDE.y5.heavy", peptide_ref="PEPTIDE",
                   is_quantifying=True, is_detecting=True),
        Transition("PEPTIDE.y5.light", peptide_ref="PEPTIDE",
                   is_identifying=True),
    ])


@pytest.fixture
def peptide_group():
    """Transition group tagged {Heavy, Light, Light}; the third is not in the reference."""
    return FeatureGroup(
        peptide_ref="PEPTIDE",
        rt=15.0,
        intensity=1.0e6,
        overall_quality=0.9,
        sub_features=[
            SubFeature("PEPTIDE.y5.heavy", rt=15.0, intensity=8.0, overall_quality=0.9,
                       label_type="Heavy"),
            SubFeature("PEPTIDE.y5.light", rt=15.1, intensity=12.0, overall_quality=0.8,
                       label_type="Light"),
            SubFeature("PEPTIDE.y6.light", rt=15.2, intensity=5.0, overall_quality=0.7,
                       label_type="Light"),
        ],
    )


@pytest.fixture
def make_group():
    """Factory for a single-transition group."""
    def _make_group(peptide_ref="PEPTIDE", rt=15.0, n_sub_features=1, **kwargs):
        sub_features = [
            SubFeature(f"{peptide_ref}.t{i}", rt=rt, intensity=100.0, overall_quality=0.5)
            for i in range(n_sub_features)
        ]
        return FeatureGroup(peptide_ref, rt=rt, sub_features=sub_features, **kwargs)
    return _make_group


# Random seed for reproducibility
@pytest.fixture(scope="session", autouse=True)
def set_random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
