"""Tests for page_selection module."""

import pytest

from pdfh.services.page_selection import resolve_pages, validate_selection
from pdfh.utils.exceptions import SelectionInputError


class TestResolvePages:
    """Tests for resolve_pages."""

    def test_no_selection_selects_all(self):
        assert resolve_pages(4) == {1, 2, 3, 4}

    def test_empty_document(self):
        assert resolve_pages(0) == set()
        assert resolve_pages(0, every=2) == set()

    def test_explicit_returned_verbatim(self):
        assert resolve_pages(5, explicit=[2, 4, 9]) == {2, 4, 9}

    def test_explicit_duplicates_collapse(self):
        assert resolve_pages(5, explicit=[3, 3, 1]) == {1, 3}

    def test_explicit_negated_is_complement(self):
        assert resolve_pages(5, explicit=[2, 4], negate=True) == {1, 3, 5}

    def test_explicit_negated_ignores_out_of_range(self):
        assert resolve_pages(4, explicit=[2, 7, 0], negate=True) == {1, 3, 4}

    def test_every_selects_multiples(self):
        assert resolve_pages(7, every=3) == {3, 6}

    def test_every_negated_selects_non_multiples(self):
        assert resolve_pages(7, every=3, negate=True) == {1, 2, 4, 5, 7}

    def test_every_one(self):
        assert resolve_pages(3, every=1) == {1, 2, 3}
        assert resolve_pages(3, every=1, negate=True) == set()

    @pytest.mark.parametrize("total", [0, 1, 5, 12])
    @pytest.mark.parametrize("every", [1, 2, 3, 7])
    def test_every_partitions_document(self, total, every):
        selected = resolve_pages(total, every=every)
        rest = resolve_pages(total, every=every, negate=True)
        assert selected | rest == set(range(1, total + 1))
        assert selected & rest == set()

    def test_zero_every_rejected(self):
        with pytest.raises(SelectionInputError):
            resolve_pages(5, every=0)

    def test_both_modes_rejected(self):
        with pytest.raises(SelectionInputError):
            resolve_pages(5, explicit=[1], every=2)


class TestValidateSelection:
    """Tests for validate_selection."""

    def test_accepts_single_mode(self):
        validate_selection([1, 2], None)
        validate_selection(None, 3)
        validate_selection(None, None)

    def test_negative_every(self):
        with pytest.raises(SelectionInputError, match="every"):
            validate_selection(None, -2)
