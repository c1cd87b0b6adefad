"""Report renderer interface."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from catalog_diff.models import ClassifiedResult


class ReportFormat(str, Enum):
    """Output formats accepted by ``catalog-diff diff --format``."""

    cli = "cli"
    json = "json"


@runtime_checkable
class ReportRenderer(Protocol):
    """Turns a classified diff into text for a terminal or a file."""

    def render(self, result: ClassifiedResult) -> str: ...
