"""Exceptions raised by the QC engine.

Data-quality conditions (missing annotations, unmatched transitions, missing
ion-ratio partners) are never raised; they are logged and degrade to
defaults. Only missing required context or a criterion that cannot be
evaluated at all aborts a run.
"""


class QCError(Exception):
    """Base class for all QC engine errors."""


class MissingInformationError(QCError):
    """Required input (criteria, template) was not provided."""


class InvalidMetaValueError(QCError, ValueError):
    """A meta-value used by a range criterion is not numeric."""

    def __init__(self, key: str, value):
        self.key = key
        self.value = value
        super().__init__(
            f"Meta-value '{key}' cannot be compared against a numeric range "
            f"(got {type(value).__name__}: {value!r})"
        )
