# escope/health.py
import logging
from collections import Counter
from typing import Dict, List

import pandas as pd

from . import constants as c
from .datasource import ClusterDataSource
from .decoder import (
    IndexRecord, IndexStatsRecord, ShardRecord,
    decode_index_stats, decode_indices, decode_nodes_info, decode_nodes_stats, decode_shards,
    get_int, get_map, get_str,
)
from .models import (
    ClusterInfo, IndexHealth, NodeBreakdown, NodeHealth, Performance, ResourceUsage, ShardHealth,
)


class HealthAggregator:
    """
    Construye las instantáneas tipadas del clúster.

    Cada operación hace una única petición a la fuente de datos; si falla, el
    `DataSourceError` se propaga. Los campos ausentes degradan a cero.
    """
    def __init__(self, source: ClusterDataSource):
        self.source = source

    # --- Registros crudos decodificados ---

    def shards(self) -> List[ShardRecord]:
        return decode_shards(self.source.get_shards())

    def indices(self) -> List[IndexRecord]:
        return decode_indices(self.source.get_indices())

    def index_stats(self) -> Dict[str, IndexStatsRecord]:
        return decode_index_stats(self.source.get_index_stats(""))

    def node_count(self) -> int:
        return len(get_map(self.source.get_nodes(), "nodes"))

    # --- Instantáneas ---

    def cluster_info(self) -> ClusterInfo:
        health = self.source.get_cluster_health()
        return ClusterInfo(
            cluster_name=get_str(health, "cluster_name"),
            status=get_str(health, "status"),
            number_of_nodes=get_int(health, "number_of_nodes"),
            active_primary_shards=get_int(health, "active_primary_shards"),
            active_shards=get_int(health, "active_shards"),
            unassigned_shards=get_int(health, "unassigned_shards"),
            relocating_shards=get_int(health, "relocating_shards"),
            initializing_shards=get_int(health, "initializing_shards"),
        )

    def node_health(self) -> List[NodeHealth]:
        return [
            NodeHealth(node_id=node.node_id, name=node.name,
                       cpu_usage=node.cpu_percent, heap_usage=node.heap_used_percent)
            for node in decode_nodes_stats(self.source.get_nodes_stats())
        ]

    def shard_health(self) -> ShardHealth:
        states = Counter(shard.state for shard in self.shards())
        return ShardHealth(
            started_shards=states[c.SHARD_STATE_STARTED],
            initializing_shards=states[c.SHARD_STATE_INITIALIZING],
            relocating_shards=states[c.SHARD_STATE_RELOCATING],
            unassigned_shards=states[c.SHARD_STATE_UNASSIGNED],
        )

    def index_health(self) -> List[IndexHealth]:
        return [
            IndexHealth(name=idx.index, health=idx.health, status=idx.status,
                        docs=idx.docs_count, size=idx.store_size)
            for idx in self.indices()
        ]

    def resource_usage(self) -> ResourceUsage:
        """Promedios y extremos de CPU y heap, solo sobre nodos con rol `data`."""
        nodes = decode_nodes_stats(self.source.get_nodes_stats())
        data_nodes = [node for node in nodes if c.NODE_ROLE_DATA in node.roles]
        if not data_nodes:
            logging.info("No hay nodos con rol data en nodes stats; uso de recursos en cero.")
            return ResourceUsage()

        # Ya vienen ordenados por id: idxmin/idxmax desempatan por el primero
        nodes_df = pd.DataFrame([node.model_dump() for node in data_nodes])
        nodes_df['label'] = nodes_df['name'] + " - " + nodes_df['ip']
        cpu_min = nodes_df.loc[nodes_df['cpu_percent'].idxmin()]
        cpu_max = nodes_df.loc[nodes_df['cpu_percent'].idxmax()]
        heap_min = nodes_df.loc[nodes_df['heap_used_percent'].idxmin()]
        heap_max = nodes_df.loc[nodes_df['heap_used_percent'].idxmax()]

        return ResourceUsage(
            node_count=len(nodes_df),
            cpu_usage=float(nodes_df['cpu_percent'].mean()),
            cpu_usage_min=float(cpu_min['cpu_percent']),
            cpu_usage_max=float(cpu_max['cpu_percent']),
            cpu_usage_min_node=cpu_min['label'],
            cpu_usage_max_node=cpu_max['label'],
            heap_usage=float(nodes_df['heap_used_percent'].mean()),
            heap_usage_min=float(heap_min['heap_used_percent']),
            heap_usage_max=float(heap_max['heap_used_percent']),
            heap_usage_min_node=heap_min['label'],
            heap_usage_max_node=heap_max['label'],
            disk_total=int(nodes_df['disk_total_bytes'].sum()),
            disk_available=int(nodes_df['disk_available_bytes'].sum()),
        )

    def performance(self) -> Performance:
        stats = self.source.get_cluster_stats()
        return Performance(
            index_total=get_int(stats, "indices.indexing.index_total"),
            index_time_in_millis=get_int(stats, "indices.indexing.index_time_in_millis"),
            query_total=get_int(stats, "indices.search.query_total"),
            query_time_in_millis=get_int(stats, "indices.search.query_time_in_millis"),
        )

    def node_breakdown(self) -> NodeBreakdown:
        nodes = decode_nodes_info(self.source.get_nodes())
        roles = Counter(role for node in nodes for role in set(node.roles))
        return NodeBreakdown(
            total=len(nodes),
            master=roles[c.NODE_ROLE_MASTER],
            data=roles[c.NODE_ROLE_DATA],
            ingest=roles[c.NODE_ROLE_INGEST],
            coordinating_only=sum(1 for node in nodes if not node.roles),
        )
