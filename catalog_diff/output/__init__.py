from catalog_diff.output.renderers import JsonRenderer, RichRenderer, create_renderer

__all__ = ["JsonRenderer", "RichRenderer", "create_renderer"]
