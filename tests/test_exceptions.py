"""Tests for the exception hierarchy."""

import pytest

from pdfh.model.objects import ObjectId
from pdfh.utils.exceptions import (
    ConfigurationError,
    EmptyResultError,
    LoadError,
    ObjectNotFoundError,
    PdfhError,
    SaveError,
    SelectionInputError,
    StructuralAbsenceError,
)


class TestExceptionMessages:
    def test_load_error(self):
        e = LoadError("/tmp/a.pdf", "bad header")
        assert e.message == "Failed to load document: /tmp/a.pdf - bad header"
        assert e.file_path == "/tmp/a.pdf"
        assert "path=/tmp/a.pdf" in str(e)

    def test_save_error(self):
        e = SaveError("/out.pdf", "Permission denied")
        assert e.message == "Failed to write out file: /out.pdf - Permission denied"

    def test_selection_input_error(self):
        e = SelectionInputError("every", 0, "must be a positive integer")
        assert str(e) == "Invalid value for 'every' (0): must be a positive integer"

    def test_selection_input_error_without_value(self):
        assert str(SelectionInputError("pages")) == "Invalid value for 'pages'"

    def test_structural_absence(self):
        e = StructuralAbsenceError("Catalog")
        assert e.structure == "Catalog"
        assert str(e) == "Catalog root not found"

    def test_empty_result(self):
        assert str(EmptyResultError()) == "Resulting document would have no pages"

    def test_object_not_found(self):
        assert str(ObjectNotFoundError(ObjectId(7, 0))) == "Object 7 0 not found"

    def test_configuration_error(self):
        e = ConfigurationError("logging.level", "unknown level")
        assert str(e) == "Configuration error for 'logging.level': unknown level"


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            LoadError("x"),
            SaveError("x"),
            SelectionInputError("every"),
            StructuralAbsenceError("Pages"),
            EmptyResultError(),
            ObjectNotFoundError(ObjectId(1)),
            ConfigurationError(),
        ],
    )
    def test_all_derive_from_base(self, error):
        assert isinstance(error, PdfhError)
