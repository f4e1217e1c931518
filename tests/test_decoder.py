"""
Tests for tolerant field decoding
"""
from escope.decoder import (
    ShardRecord, decode_index_stats, decode_indices, decode_nodes_info, decode_nodes_stats,
    decode_shards, get_count, get_float, get_int, get_list, get_map, get_path, get_str,
)

TREE = {
    "cluster_name": "prod",
    "number_of_nodes": 3,
    "ratio": 0.5,
    "flag": True,
    "nested": {"deep": {"value": 42.9}},
    "docs.count": "1200",
    "roles": ["data"],
}


class TestGetters:
    """Typed getters return zero values instead of failing"""

    def test_present_values(self):
        assert get_str(TREE, "cluster_name") == "prod"
        assert get_int(TREE, "number_of_nodes") == 3
        assert get_float(TREE, "ratio") == 0.5
        assert get_int(TREE, "nested.deep.value") == 42
        assert get_float(TREE, ["nested", "deep", "value"]) == 42.9

    def test_missing_fields(self):
        assert get_str(TREE, "missing") == ""
        assert get_int(TREE, "missing.field") == 0
        assert get_float(TREE, "nested.nope") == 0.0
        assert get_map(TREE, "missing") == {}
        assert get_list(TREE, "missing") == []

    def test_wrong_types_degrade_to_zero(self):
        assert get_int(TREE, "cluster_name") == 0
        assert get_float(TREE, "cluster_name") == 0.0
        assert get_str(TREE, "number_of_nodes") == ""
        assert get_map(TREE, "roles") == {}
        assert get_list(TREE, "nested") == []

    def test_bool_is_not_a_number(self):
        assert get_int(TREE, "flag") == 0
        assert get_float(TREE, "flag") == 0.0

    def test_path_through_non_map(self):
        assert get_path(TREE, "cluster_name.inner") is None
        assert get_int(TREE, "roles.0") == 0

    def test_dotted_key_via_tuple(self):
        assert get_str(TREE, ("docs.count",)) == "1200"
        assert get_str(TREE, "docs.count") == ""

    def test_non_mapping_root(self):
        assert get_str(None, "a") == ""
        assert get_int([1, 2], "a") == 0

    def test_count_accepts_numeric_strings(self):
        assert get_count({"pri": "5"}, "pri") == 5
        assert get_count({"pri": 3}, "pri") == 3
        assert get_count({"pri": "abc"}, "pri") == 0
        assert get_count({}, "pri") == 0


class TestDecoders:
    """Per-response decoding into records"""

    def test_decode_shards_skips_non_mapping_rows(self):
        shards = decode_shards([{"index": "a", "state": "STARTED", "node": "n1"}, "junk", 3])
        assert len(shards) == 1
        assert shards[0].index == "a"
        assert shards[0].ip == ""

    def test_decode_shards_non_list(self):
        assert decode_shards({"unexpected": True}) == []

    def test_shard_host_prefers_node_then_ip(self):
        assert ShardRecord(node="n1", ip="10.0.0.1").host == "n1"
        assert ShardRecord(node="-", ip="10.0.0.1").host == "10.0.0.1"
        assert ShardRecord(node="", ip="-").host == ""

    def test_decode_indices(self, indices_response):
        indices = decode_indices(indices_response)
        assert indices[0].index == "logs"
        assert indices[0].primaries == 1
        assert indices[0].replicas == 1
        assert indices[0].docs_count == "1000"
        assert indices[0].store_size == "120gb"

    def test_decode_index_stats(self):
        raw = {"indices": {
            "logs": {"primaries": {"store": {"size_in_bytes": 100}, "docs": {"count": 5}},
                     "total": {"segments": {"count": 7}, "store": {"size_in_bytes": 200}}},
            "broken": "not-a-map",
        }}
        stats = decode_index_stats(raw)
        assert list(stats) == ["logs"]
        assert stats["logs"].primary_size_bytes == 100
        assert stats["logs"].primary_doc_count == 5
        assert stats["logs"].segment_count == 7
        assert stats["logs"].total_size_bytes == 200
        assert stats["logs"].query_total == 0.0

    def test_decode_nodes_stats_sorted_by_id(self, nodes_stats_response):
        nodes = decode_nodes_stats(nodes_stats_response)
        assert [n.node_id for n in nodes] == ["n1", "n2", "n3"]
        assert nodes[1].roles == ["data", "ingest"]
        assert nodes[1].cpu_percent == 60.0

    def test_decode_nodes_info_filters_non_string_roles(self):
        nodes = decode_nodes_info({"nodes": {"x": {"name": "a", "roles": ["data", 5, None]}}})
        assert nodes[0].roles == ["data"]
