"""Parallel diffs of many independent snapshot pairs."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from catalog_diff.config.models import CatalogDiffConfig
from catalog_diff.engine import CatalogDiffer
from catalog_diff.models import ClassifiedResult

logger = logging.getLogger(__name__)

SnapshotPair = tuple[Mapping[str, Any], Mapping[str, Any]]


def diff_many(
    pairs: Mapping[Hashable, SnapshotPair],
    config: CatalogDiffConfig | None = None,
    max_workers: int | None = None,
) -> dict[Hashable, ClassifiedResult]:
    """Diff every ``(original, updated)`` pair on a thread pool.

    Results are keyed and ordered like *pairs*. If any pair fails, the error
    of the first failing pair in input order is raised.
    """
    differ = CatalogDiffer(config)
    workers = max_workers or differ.config.limits.max_workers
    logger.debug("diffing %d snapshot pairs on %d workers", len(pairs), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            key: executor.submit(differ.diff, original, updated)
            for key, (original, updated) in pairs.items()
        }
        return {key: future.result() for key, future in futures.items()}
