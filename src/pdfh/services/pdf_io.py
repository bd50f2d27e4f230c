"""
pdfh - PDF Load / Save

Bridge between pikepdf and the in-memory graph. Loading walks every object
reachable from the trailer and copies it into a :class:`Graph`; saving builds
a fresh pikepdf document from a graph in two passes (allocate, then fill).
"""

import logging
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Any

import pikepdf

from pdfh.model.graph import Graph
from pdfh.model.objects import Name, ObjectId, Reference, Stream
from pdfh.model.outline import read_outline
from pdfh.utils.exceptions import LoadError, SaveError

logger = logging.getLogger(__name__)

# Stream keys rewritten by pikepdf itself when the data is written
_STREAM_MANAGED_KEYS = ("Length", "Filter", "DecodeParms")


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _is_container(obj: Any) -> bool:
    return isinstance(obj, (pikepdf.Stream, pikepdf.Dictionary, pikepdf.Array))


def _from_pikepdf(obj: Any, pending: list) -> Any:
    """Convert one pikepdf value; indirect containers become references."""
    if isinstance(obj, pikepdf.Object) and _is_container(obj) and obj.is_indirect:
        pending.append(obj)
        return Reference(ObjectId(*obj.objgen))
    if isinstance(obj, pikepdf.Dictionary):
        return {key[1:]: _from_pikepdf(value, pending) for key, value in obj.items()}
    if isinstance(obj, pikepdf.Array):
        return [_from_pikepdf(value, pending) for value in obj]
    if isinstance(obj, pikepdf.Name):
        return Name(str(obj)[1:])
    if isinstance(obj, pikepdf.String):
        return bytes(obj)
    if isinstance(obj, Decimal):
        return float(obj)
    if obj is None or isinstance(obj, (bool, int, float)):
        return obj
    logger.debug("Unsupported object %r replaced with null", obj)
    return None


def _convert_indirect(obj: Any, pending: list) -> Any:
    if isinstance(obj, pikepdf.Stream):
        dictionary = {
            key[1:]: _from_pikepdf(value, pending)
            for key, value in obj.stream_dict.items()
            if key != "/Length"
        }
        return Stream(dictionary, obj.read_raw_bytes())
    if isinstance(obj, pikepdf.Dictionary):
        return {key[1:]: _from_pikepdf(value, pending) for key, value in obj.items()}
    return [_from_pikepdf(value, pending) for value in obj]


def load(path: str | Path) -> Graph:
    """Read a PDF file into a graph.

    Args:
        path: PDF file to read.

    Returns:
        Graph holding every object reachable from the trailer.

    Raises:
        LoadError: If the file is missing, encrypted, or not a valid PDF.
    """
    path = str(path)
    if not os.path.isfile(path):
        raise LoadError(path, "file not found") from FileNotFoundError(path)

    try:
        with pikepdf.open(path) as pdf:
            pending: list = []
            trailer = {
                key[1:]: _from_pikepdf(value, pending)
                for key, value in pdf.trailer.items()
                if key in ("/Root", "/Info")
            }

            objects: dict[ObjectId, Any] = {}
            while pending:
                obj = pending.pop()
                object_id = ObjectId(*obj.objgen)
                if object_id in objects:
                    continue
                objects[object_id] = _convert_indirect(obj, pending)

            graph = Graph(objects, trailer, version=str(pdf.pdf_version))
    except pikepdf.PasswordError as e:
        raise LoadError(path, f"password protected: {e}") from e
    except (OSError, pikepdf.PdfError) as e:
        raise LoadError(path, str(e)) from e

    graph.bookmarks = read_outline(graph)
    logger.debug("Loaded %s: %d objects, %d pages", path, len(graph.objects), graph.page_count())
    return graph


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------


def _dictionary_items(dictionary: dict, graph: Graph, handles: dict[ObjectId, Any], skip=()):
    """Yield converted ``(/Key, value)`` pairs, leaving out null entries."""
    for key, item in dictionary.items():
        if key in skip:
            continue
        converted = _to_pikepdf(item, graph, handles)
        if converted is not None:
            yield "/" + key, converted


def _to_pikepdf(value: Any, graph: Graph, handles: dict[ObjectId, Any]) -> Any:
    if isinstance(value, Reference):
        if value.target in handles:
            return handles[value.target]
        target = graph.objects.get(value.target)
        if target is None or isinstance(target, (dict, list, Stream)):
            return None
        # Indirect scalars are written inline
        return _to_pikepdf(target, graph, handles)
    if isinstance(value, Name):
        return pikepdf.Name("/" + value.value)
    if isinstance(value, bytes):
        return pikepdf.String(value)
    if isinstance(value, str):
        return pikepdf.String(value)
    if isinstance(value, dict):
        return pikepdf.Dictionary(dict(_dictionary_items(value, graph, handles)))
    if isinstance(value, list):
        return pikepdf.Array([_to_pikepdf(item, graph, handles) for item in value])
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


def _build_document(graph: Graph) -> pikepdf.Pdf:
    pdf = pikepdf.Pdf.new()
    handles: dict[ObjectId, Any] = {}

    for object_id, value in graph.objects.items():
        if isinstance(value, Stream):
            handles[object_id] = pikepdf.Stream(pdf, b"")
        elif isinstance(value, dict):
            handles[object_id] = pdf.make_indirect(pikepdf.Dictionary())
        elif isinstance(value, list):
            handles[object_id] = pdf.make_indirect(pikepdf.Array())

    for object_id, handle in handles.items():
        value = graph.objects[object_id]
        if isinstance(value, Stream):
            handle.write(
                value.data,
                filter=_to_pikepdf(value.get("Filter"), graph, handles),
                decode_parms=_to_pikepdf(value.get("DecodeParms"), graph, handles),
            )
            for key, item in _dictionary_items(
                value.dictionary, graph, handles, skip=_STREAM_MANAGED_KEYS
            ):
                handle[key] = item
        elif isinstance(value, dict):
            for key, item in _dictionary_items(value, graph, handles):
                handle[key] = item
        else:
            for item in value:
                handle.append(_to_pikepdf(item, graph, handles))

    for key in ("Root", "Info"):
        item = graph.trailer.get(key)
        if isinstance(item, Reference) and item.target in handles:
            pdf.trailer["/" + key] = handles[item.target]
    return pdf


def save(graph: Graph, path: str | Path, compress: bool = False) -> None:
    """Serialize *graph* to *path* atomically.

    The document is written to a temporary file in the destination directory
    and moved into place only once complete, so an existing file at *path*
    is never left half written.

    Args:
        graph: Graph to write.
        path: Destination file.
        compress: Let pikepdf Flate-encode unfiltered streams and generate
            object streams. Otherwise streams keep their current encoding.

    Raises:
        SaveError: If the destination cannot be written.
    """
    path = Path(path)

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp", delete=False
        ) as tmp:
            tmp_name = tmp.name

        pdf = _build_document(graph)
        try:
            pdf.save(
                tmp_name,
                min_version=graph.version,
                compress_streams=compress,
                stream_decode_level=None if compress else pikepdf.StreamDecodeLevel.none,
                object_stream_mode=(
                    pikepdf.ObjectStreamMode.generate
                    if compress
                    else pikepdf.ObjectStreamMode.preserve
                ),
            )
        finally:
            pdf.close()

        os.replace(tmp_name, path)
        tmp_name = None
    except (OSError, pikepdf.PdfError) as e:
        raise SaveError(str(path), str(e)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Saved %s (%d objects)", path, len(graph.objects))
