"""
pdfh - Model Package

In-memory object graph of a PDF document.
"""

from pdfh.model.graph import Graph
from pdfh.model.objects import Name, ObjectId, Reference, Stream
from pdfh.model.outline import Bookmark

__all__ = ["Bookmark", "Graph", "Name", "ObjectId", "Reference", "Stream"]
