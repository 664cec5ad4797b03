"""
GraphQL compilation tests
"""

from ..query.builders import (
    POOL_DESCRIPTOR,
    MEMBER_DESCRIPTOR,
    TRANSACTION_DESCRIPTOR,
    DAILY_POOL_STATS_DESCRIPTOR,
)
from ..query.compiler import compile_query, resolve_fields, default_relation_fields
from ..query.types import QueryConfig, RelationSelection
from ..data.types import Pool, PaymasterContract


def _config(**kwargs):
    return QueryConfig(**kwargs)


class TestCompileQuery:
    """Document layout and variables"""

    def test_exact_document(self):
        """Whole document for a filtered, ordered, limited pool query"""
        config = _config(
            selected_fields=["id", "memberCount"],
            where={"memberCount_gte": "10"},
            order_by="memberCount",
            order_direction="desc",
            first=5,
        )
        document, variables = compile_query(POOL_DESCRIPTOR, config)
        assert document == "\n".join([
            "query GetPools($first: Int!, $skip: Int!, $memberCount_gte: BigInt) {",
            "  pools(where: { memberCount_gte: $memberCount_gte }, orderBy: memberCount, "
            "orderDirection: desc, first: $first, skip: $skip) {",
            "    id",
            "    memberCount",
            "  }",
            "}",
        ])
        assert variables == {"first": 5, "skip": 0, "memberCount_gte": "10"}

    def test_defaults(self):
        """No where or order clause when none is configured"""
        document, variables = compile_query(POOL_DESCRIPTOR, _config())
        assert "where" not in document
        assert "orderBy" not in document
        assert variables == {"first": 100, "skip": 0}

    def test_default_limit_override(self):
        """An unset limit falls back to the given default"""
        _, variables = compile_query(POOL_DESCRIPTOR, _config(), default_limit=25)
        assert variables["first"] == 25

    def test_default_fields(self):
        """Entity defaults are selected when nothing is"""
        document, _ = compile_query(POOL_DESCRIPTOR, _config())
        for name in POOL_DESCRIPTOR.default_fields:
            assert f"    {name}\n" in document

    def test_deterministic(self):
        """Equal configs compile to equal output"""
        config = _config(where={"network": "base-sepolia", "paymaster_": {"address": "0xabc"}})
        assert compile_query(POOL_DESCRIPTOR, config) == compile_query(POOL_DESCRIPTOR, config.copy())

    def test_big_int_values_are_strings(self):
        """BigInt variables travel as decimal strings"""
        _, variables = compile_query(POOL_DESCRIPTOR, _config(where={"joiningFee_lte": 10 ** 18}))
        assert variables["joiningFee_lte"] == "1000000000000000000"


class TestVariableTypes:
    """Variable types follow field conventions"""

    def _declarations(self, descriptor, where):
        document, _ = compile_query(descriptor, _config(where=where))
        return document.splitlines()[0]

    def test_id(self):
        """The id field is typed ID"""
        assert "$id: ID" in self._declarations(POOL_DESCRIPTOR, {"id": "84532-1"})

    def test_string(self):
        """Unknown fields are typed String"""
        assert "$network: String" in self._declarations(POOL_DESCRIPTOR, {"network": "base-sepolia"})

    def test_int_keeps_native_value(self):
        """Int variables stay JSON numbers"""
        document, variables = compile_query(POOL_DESCRIPTOR, _config(where={"chainId": 84532}))
        assert "$chainId: Int" in document
        assert variables["chainId"] == 84532

    def test_boolean(self):
        """Boolean values are typed Boolean"""
        line = self._declarations(MEMBER_DESCRIPTOR, {"nullifierUsed": True})
        assert "$nullifierUsed: Boolean" in line

    def test_list(self):
        """List operators wrap the element type"""
        document, variables = compile_query(POOL_DESCRIPTOR, _config(where={"poolId_in": [1, 2]}))
        assert "$poolId_in: [BigInt!]" in document
        assert variables["poolId_in"] == ["1", "2"]


class TestRelationFilters:
    def test_nested_where(self):
        """A relation filter renders a nested literal"""
        document, variables = compile_query(
            POOL_DESCRIPTOR, _config(where={"paymaster_": {"address": "0xabc"}})
        )
        assert "where: { paymaster_: { address: $paymaster_address } }" in document
        assert "$paymaster_address: String" in document
        assert variables["paymaster_address"] == "0xabc"

    def test_two_levels(self):
        """Relation filters nest to any depth"""
        document, variables = compile_query(
            MEMBER_DESCRIPTOR, _config(where={"pool_": {"paymaster_": {"address": "0xabc"}}})
        )
        assert "pool_: { paymaster_: { address: $pool_paymaster_address } }" in document
        assert variables["pool_paymaster_address"] == "0xabc"

    def test_related_field_types(self):
        """Nested variables take the related entity's field types"""
        document, variables = compile_query(MEMBER_DESCRIPTOR, _config(where={"pool_": {"poolId": "1"}}))
        assert "$pool_poolId: BigInt" in document
        assert variables["pool_poolId"] == "1"

    def test_null_literal(self):
        """None renders as null without a variable"""
        document, variables = compile_query(TRANSACTION_DESCRIPTOR, _config(where={"pool_not": None}))
        assert "where: { pool_not: null }" in document
        assert "pool_not" not in variables

    def test_reserved_variable_names(self):
        """A filter on a field called first does not shadow the page size"""
        document, variables = compile_query(POOL_DESCRIPTOR, _config(where={"first": "1"}))
        assert "where: { first: $first_2 }" in document
        assert variables["first"] == 100
        assert variables["first_2"] == "1"

    def test_nested_name_beside_camel_case_field(self):
        """poolId and pool_: { id } compile to distinct variables"""
        document, variables = compile_query(
            DAILY_POOL_STATS_DESCRIPTOR, _config(where={"poolId": "1", "pool_": {"id": "84532-1"}})
        )
        assert "where: { poolId: $poolId, pool_: { id: $pool_id } }" in document
        assert "$pool_id: ID" in document
        assert variables["poolId"] == "1"
        assert variables["pool_id"] == "84532-1"

    def test_colliding_variable_names(self):
        """A taken variable name gets a numeric suffix"""
        config = _config(where={"pool_id": "a", "pool_": {"id": "b"}})
        document, variables = compile_query(MEMBER_DESCRIPTOR, config)
        assert "where: { pool_id: $pool_id, pool_: { id: $pool_id_2 } }" in document
        assert (variables["pool_id"], variables["pool_id_2"]) == ("a", "b")


class TestRelationSelections:
    def test_list_relation(self):
        """List relations carry paging and ordering arguments"""
        relation = RelationSelection("members", ("id", "memberIndex"), first=10,
                                     order_by="addedAtTimestamp", order_direction="desc")
        document, _ = compile_query(POOL_DESCRIPTOR, _config(selected_fields=["id"]), [relation])
        assert document.splitlines()[2:-2] == [
            "    id",
            "    members(first: 10, orderBy: addedAtTimestamp, orderDirection: desc) {",
            "      id",
            "      memberIndex",
            "    }",
        ]

    def test_relation_replaces_default_nested_field(self):
        """A selected `paymaster { ... }` field gives way to the relation selection"""
        relation = RelationSelection("paymaster", ("id", "network"))
        fields = resolve_fields(POOL_DESCRIPTOR, _config(), [relation])
        assert not any(name.startswith("paymaster") for name in fields)

    def test_default_relation_fields(self):
        """Related entities select their scalar defaults"""
        assert default_relation_fields(Pool) == POOL_DESCRIPTOR.scalar_fields
        assert "id" in default_relation_fields(PaymasterContract)
        assert default_relation_fields(None) == ("id",)
