"""
Shared fixtures: raw Elasticsearch payloads and an in-memory data source.
"""
import time

import pytest

from escope.datasource import ClusterDataSource

GB = 1024 ** 3


class FakeDataSource(ClusterDataSource):
    """In-memory ClusterDataSource. `fail` maps method name -> exception to raise."""

    def __init__(self, responses=None, fail=None):
        self.responses = responses or {}
        self.fail = fail or {}
        self.calls = []
        self.timeouts = []

    def _answer(self, name, default, timeout=None):
        self.calls.append(name)
        self.timeouts.append(timeout)
        if name in self.fail:
            raise self.fail[name]
        return self.responses.get(name, default)

    def get_cluster_health(self, timeout=None):
        return self._answer("cluster_health", {}, timeout)

    def get_cluster_stats(self, timeout=None):
        return self._answer("cluster_stats", {}, timeout)

    def get_nodes(self, timeout=None):
        return self._answer("nodes", {}, timeout)

    def get_nodes_stats(self, timeout=None):
        return self._answer("nodes_stats", {}, timeout)

    def get_shards(self, timeout=None):
        return self._answer("shards", [], timeout)

    def get_indices(self, timeout=None):
        return self._answer("indices", [], timeout)

    def get_index_stats(self, index="", timeout=None):
        return self._answer("index_stats", {}, timeout)


class SlowDataSource(FakeDataSource):
    """Answers every fetch after `delay` seconds, ignoring the timeout it is given."""

    def __init__(self, delay, responses=None, fail=None):
        super().__init__(responses, fail)
        self.delay = delay

    def _answer(self, name, default, timeout=None):
        time.sleep(self.delay)
        return super()._answer(name, default, timeout)


def index_stats_entry(primary_size=0, docs=0, segments=0, total_size=None,
                      query_total=0, query_ms=0, index_total=0, index_ms=0):
    return {
        "primaries": {"store": {"size_in_bytes": primary_size}, "docs": {"count": docs}},
        "total": {
            "store": {"size_in_bytes": primary_size if total_size is None else total_size},
            "segments": {"count": segments},
            "search": {"query_total": query_total, "query_time_in_millis": query_ms},
            "indexing": {"index_total": index_total, "index_time_in_millis": index_ms},
        },
    }


def node_stats_entry(name, ip, roles, cpu, heap, disk_total=0, disk_available=0):
    return {
        "name": name,
        "ip": ip,
        "roles": roles,
        "os": {"cpu": {"percent": cpu}},
        "jvm": {"mem": {"heap_used_percent": heap}},
        "fs": {"total": {"total_in_bytes": disk_total, "available_in_bytes": disk_available}},
    }


@pytest.fixture
def cluster_health_response():
    return {
        "cluster_name": "prod-logs",
        "status": "yellow",
        "number_of_nodes": 3,
        "active_primary_shards": 12,
        "active_shards": 20,
        "unassigned_shards": 2,
        "relocating_shards": 1,
        "initializing_shards": 0,
    }


@pytest.fixture
def nodes_stats_response():
    return {
        "nodes": {
            "n2": node_stats_entry("data-2", "10.0.0.2", ["data", "ingest"], 60, 70, 1000, 400),
            "n1": node_stats_entry("data-1", "10.0.0.1", ["data"], 20, 50, 1000, 600),
            "n3": node_stats_entry("master-1", "10.0.0.3", ["master"], 95, 90, 500, 100),
        }
    }


@pytest.fixture
def nodes_response():
    return {
        "nodes": {
            "n1": {"name": "data-1", "roles": ["data"]},
            "n2": {"name": "data-2", "roles": ["data", "ingest"]},
            "n3": {"name": "master-1", "roles": ["master"]},
            "n4": {"name": "coord-1", "roles": []},
            "n5": {"name": "data-3", "roles": ["data", "master"]},
        }
    }


@pytest.fixture
def shards_response():
    return [
        {"index": "logs", "shard": "0", "prirep": "p", "state": "STARTED", "ip": "10.0.0.1", "node": "data-1"},
        {"index": "logs", "shard": "0", "prirep": "r", "state": "STARTED", "ip": "10.0.0.2", "node": "data-2"},
        {"index": "logs", "shard": "1", "prirep": "p", "state": "RELOCATING", "ip": "10.0.0.1", "node": "data-1"},
        {"index": "logs", "shard": "1", "prirep": "r", "state": "UNASSIGNED", "ip": None, "node": None},
        {"index": "metrics", "shard": "0", "prirep": "p", "state": "INITIALIZING", "ip": "10.0.0.2", "node": "data-2"},
    ]


@pytest.fixture
def indices_response():
    return [
        {"health": "green", "status": "open", "index": "logs", "uuid": "a1", "pri": "1", "rep": "1",
         "docs.count": "1000", "store.size": "120gb"},
        {"health": "yellow", "status": "open", "index": "metrics", "uuid": "b2", "pri": "2", "rep": "1",
         "docs.count": "50", "store.size": "1mb"},
    ]


@pytest.fixture
def fake_source():
    return FakeDataSource()
