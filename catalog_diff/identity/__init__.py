"""Identity tracking and rename detection across snapshots."""

from catalog_diff.identity.index import IdentityIndex, build_index, resolve_identifier
from catalog_diff.identity.renames import RenameDetector, RenameResult, detect_renames

__all__ = [
    "IdentityIndex",
    "RenameDetector",
    "RenameResult",
    "build_index",
    "detect_renames",
    "resolve_identifier",
]
