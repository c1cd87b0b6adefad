from catalog_diff.interfaces.renderer import ReportFormat, ReportRenderer

__all__ = ["ReportFormat", "ReportRenderer"]
