"""Breaking-change classification and change descriptions."""

from catalog_diff.compat.classifier import BreakingChangeClassifier, Verdict, is_breaking
from catalog_diff.compat.describe import describe_changes

__all__ = [
    "BreakingChangeClassifier",
    "Verdict",
    "describe_changes",
    "is_breaking",
]
