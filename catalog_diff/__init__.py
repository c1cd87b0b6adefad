"""Structural diff and breaking-change classification for entity catalogs."""

from catalog_diff.batch import diff_many
from catalog_diff.compat import BreakingChangeClassifier, describe_changes, is_breaking
from catalog_diff.config import CatalogDiffConfig, load_config
from catalog_diff.engine import CatalogDiffer, diff
from catalog_diff.errors import (
    CatalogDiffError,
    InvalidSnapshotError,
    SnapshotTooLargeError,
    UnhandledPropertyTypeError,
)
from catalog_diff.identity import IdentityIndex, RenameDetector, build_index, detect_renames
from catalog_diff.lifecycle import LifecycleClassifier
from catalog_diff.models import ClassifiedResult, Summary, UpdatedEntity
from catalog_diff.release import recommend_bump
from catalog_diff.snapshot import load_snapshot
from catalog_diff.tree import TreeDiff, TreeDiffer, diff_trees

__version__ = "0.1.0"

__all__ = [
    "BreakingChangeClassifier",
    "CatalogDiffConfig",
    "CatalogDiffError",
    "CatalogDiffer",
    "ClassifiedResult",
    "IdentityIndex",
    "InvalidSnapshotError",
    "LifecycleClassifier",
    "RenameDetector",
    "SnapshotTooLargeError",
    "Summary",
    "TreeDiff",
    "TreeDiffer",
    "UnhandledPropertyTypeError",
    "UpdatedEntity",
    "build_index",
    "describe_changes",
    "detect_renames",
    "diff",
    "diff_many",
    "diff_trees",
    "is_breaking",
    "load_config",
    "load_snapshot",
    "recommend_bump",
]
