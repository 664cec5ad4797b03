"""
Filter representation tests
"""

import pytest

from ..errors import UnsupportedFilterError, ValidationError
from ..query.filters import (
    FilterOp,
    Filter,
    RelationFilter,
    parse_filter_key,
    to_filters,
    merge_where,
    check_date,
)


class TestParseFilterKey:
    """<field>[_<operator>] keys"""

    @pytest.mark.parametrize("key, field, op", [
        ("memberCount", "memberCount", FilterOp.EQ),
        ("memberCount_gte", "memberCount", FilterOp.GTE),
        ("joiningFee_lt", "joiningFee", FilterOp.LT),
        ("address_not", "address", FilterOp.NOT),
        ("address_in", "address", FilterOp.IN),
        ("address_not_in", "address", FilterOp.NOT_IN),
        ("recipient_contains", "recipient", FilterOp.CONTAINS),
        ("recipient_not_contains", "recipient", FilterOp.NOT_CONTAINS),
    ])
    def test_suffixes(self, key, field, op):
        """Operator suffixes split off the field name"""
        assert parse_filter_key(key) == (field, op)

    @pytest.mark.parametrize("key", ["", "1abc", "member count", "memberCount_", "a-b", None])
    def test_invalid_keys(self, key):
        """Malformed keys are rejected"""
        with pytest.raises(UnsupportedFilterError):
            parse_filter_key(key)

    def test_unsupported_filter_is_validation_error(self):
        """UnsupportedFilterError is a ValidationError"""
        with pytest.raises(ValidationError):
            parse_filter_key("bad key")


class TestToFilters:
    def test_preserves_order(self):
        """Nodes follow the where-map key order"""
        nodes = to_filters({"b": 1, "a_gt": 2})
        assert nodes == [Filter("b", FilterOp.EQ, 1), Filter("a", FilterOp.GT, 2)]

    def test_relation_filter(self):
        """A trailing underscore marks a relation filter"""
        nodes = to_filters({"paymaster_": {"address": "0xabc"}})
        assert nodes == [RelationFilter("paymaster", (Filter("address", FilterOp.EQ, "0xabc"),))]
        assert nodes[0].key == "paymaster_"

    def test_relation_filter_needs_mapping(self):
        """Relation filters need a nested map"""
        with pytest.raises(UnsupportedFilterError):
            to_filters({"paymaster_": "0xabc"})

    def test_list_operator_needs_list(self):
        """_in filters need a list value"""
        with pytest.raises(UnsupportedFilterError):
            to_filters({"address_in": "0xabc"})

    def test_filter_key(self):
        """A node renders back to its where key"""
        assert Filter("memberCount", FilterOp.GTE, "1").key == "memberCount_gte"


class TestMergeWhere:
    """Last write wins per key; relation maps merge recursively"""

    def test_last_write_wins(self):
        """Plain keys are overwritten"""
        assert merge_where({"a": 1, "b": 2}, {"a": 3}) == {"a": 3, "b": 2}

    def test_relation_maps_merge(self):
        """Relation maps merge key by key"""
        merged = merge_where({"pool_": {"poolId": "1"}}, {"pool_": {"network": "base-sepolia"}})
        assert merged == {"pool_": {"poolId": "1", "network": "base-sepolia"}}

    def test_inputs_not_mutated(self):
        """Merging copies both inputs"""
        existing = {"pool_": {"poolId": "1"}}
        conditions = {"sender_in": ["0x1"]}
        merged = merge_where(existing, conditions)
        merged["sender_in"].append("0x2")
        assert existing == {"pool_": {"poolId": "1"}}
        assert conditions == {"sender_in": ["0x1"]}


class TestCheckDate:
    def test_valid(self):
        """A real calendar date passes through"""
        assert check_date("2024-02-29") == "2024-02-29"

    @pytest.mark.parametrize("date", ["2024-2-1", "20240101", "2023-02-29", "2024-13-01", 20240101])
    def test_invalid(self, date):
        """Anything but a valid YYYY-MM-DD string is rejected"""
        with pytest.raises(ValidationError):
            check_date(date)
