"""Tests for the field-deletion sentinel and the StoreClient contract."""

import copy

import pytest

from doc_store import DELETE_FIELD, AllocatedId, DeleteField, StoreClient, is_delete_field


class TestDeleteField:
    def test_singleton(self):
        assert DeleteField() is DELETE_FIELD

    def test_survives_copy(self):
        assert copy.deepcopy({"f": DELETE_FIELD})["f"] is DELETE_FIELD

    @pytest.mark.parametrize("value", [None, "", 0, False, "DELETE_FIELD", {}])
    def test_distinct_from_empty_values(self, value):
        assert not is_delete_field(value)
        assert value is not DELETE_FIELD

    def test_is_delete_field(self):
        assert is_delete_field(DELETE_FIELD)

    def test_repr(self):
        assert repr(DELETE_FIELD) == "DELETE_FIELD"


class TestContract:
    def test_abstract(self):
        with pytest.raises(TypeError):
            StoreClient()

    def test_allocated_id_is_value(self):
        assert AllocatedId(id="a", address="/c/a") == AllocatedId(id="a", address="/c/a")
