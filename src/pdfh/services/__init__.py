"""
pdfh - Services Package

Page-tree operations on graphs and the file-level commands built on them.
"""

from pdfh.services.finalize import finalize
from pdfh.services.merge import duplicate_graph, merge_graphs
from pdfh.services.pdf_io import load, save

__all__ = ["duplicate_graph", "finalize", "load", "merge_graphs", "save"]
