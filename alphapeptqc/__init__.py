"""AlphaPeptQC - QC filtering for targeted proteomics and metabolomics features.

Flags or filters chromatographic feature groups (transition groups) and their
sub-features (transitions) against name-matched acceptance criteria, and
learns those criteria from known-good training runs.
"""

__version__ = "0.1.0"

# Import main submodules for convenient access
from alphapeptqc import features
from alphapeptqc import targeted
from alphapeptqc import qc

__all__ = [
    "features",
    "targeted",
    "qc",
]
