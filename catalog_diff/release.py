"""Semver bump recommendation derived from a classified diff."""

from __future__ import annotations

from typing import Literal

from catalog_diff.models import ClassifiedResult

Bump = Literal["major", "minor", "patch"]


def recommend_bump(result: ClassifiedResult, strict: bool = False) -> Bump:
    """Return the semver bump a release containing *result* needs.

    By default: major for any deleted entity, minor for any added entity,
    patch for everything else (updates, renames, deprecations, reverts or
    no change at all).

    With ``strict=True`` breaking body changes of updated, renamed or
    deprecated entities also call for major, and renames or deprecations
    call for at least minor.
    """
    if result.deleted:
        return "major"
    if strict and result.breaking_bodies():
        return "major"
    if result.added:
        return "minor"
    if strict and (result.renamed or result.deprecated):
        return "minor"
    return "patch"
