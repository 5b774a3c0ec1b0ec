from .columns import Column, ColumnsSet
from .layout import Layout, load_layout

__all__ = ["Column", "ColumnsSet", "Layout", "load_layout"]
