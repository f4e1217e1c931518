# escope/warning_analyzer.py
from typing import Dict, Iterable

import pandas as pd

from . import constants as c
from .decoder import IndexStatsRecord, ShardRecord
from .models import DynamicThresholds, SegmentWarnings, ShardWarnings


def is_system_index(name: str) -> bool:
    if name.startswith(c.DOT_PREFIX):
        return True
    return name.startswith(c.SYSTEM_INDEX_PREFIXES)


def balance_ratio(per_node_counts: Iterable[int]) -> float:
    """min/max de shards iniciados por nodo. 1.0 con menos de dos nodos."""
    counts = list(per_node_counts)
    if len(counts) < 2 or max(counts) == 0:
        return 1.0
    return min(counts) / max(counts)


def shard_warnings(shards: Iterable[ShardRecord]) -> ShardWarnings:
    shards_df = pd.DataFrame([shard.model_dump() | {'host': shard.host} for shard in shards],
                             columns=['index', 'shard', 'prirep', 'state', 'ip', 'node', 'host'])
    states = shards_df['state'].value_counts()
    unassigned = int(states.get(c.SHARD_STATE_UNASSIGNED, 0))
    relocating = int(states.get(c.SHARD_STATE_RELOCATING, 0))
    initializing = int(states.get(c.SHARD_STATE_INITIALIZING, 0))

    critical, warning, recommendations = [], [], []

    if unassigned > 0:
        critical.append(c.MSG_UNASSIGNED_SHARDS.format(count=unassigned))
        recommendations.append(c.MSG_INVESTIGATE_UNASSIGNED.format(count=unassigned))
    if relocating > 0:
        warning.append(c.MSG_RELOCATING_SHARDS.format(count=relocating))
    if initializing > 0:
        warning.append(c.MSG_INITIALIZING_SHARDS.format(count=initializing))

    started = shards_df[(shards_df['state'] == c.SHARD_STATE_STARTED) & (shards_df['host'] != "")]
    ratio = balance_ratio(started.groupby('host').size().tolist())
    unbalanced = ratio < c.BALANCE_RATIO_THRESHOLD
    if unbalanced:
        warning.append(c.MSG_SHARD_UNBALANCED.format(ratio=ratio))
        recommendations.append(c.MSG_CONSIDER_REBALANCING)

    if not critical and not warning:
        recommendations.append(c.MSG_SHARD_HEALTHY)

    return ShardWarnings(
        unassigned_shards=unassigned,
        relocating_shards=relocating,
        initializing_shards=initializing,
        unbalanced_ratio=ratio,
        unbalanced_shards=unbalanced,
        critical_issues=critical,
        warning_issues=warning,
        recommendations=recommendations,
    )


def segment_warnings(stats: Dict[str, IndexStatsRecord], thresholds: DynamicThresholds) -> SegmentWarnings:
    """Cuenta índices con demasiados segmentos o con segmentos de tamaño medio anómalo."""
    high = small = large = 0
    for name, record in stats.items():
        if is_system_index(name):
            continue
        if record.segment_count > thresholds.high_segment_threshold:
            high += 1
        avg_segment_bytes = record.total_size_bytes // record.segment_count if record.segment_count > 0 else 0
        if avg_segment_bytes < thresholds.small_segment_threshold:
            small += 1
        if avg_segment_bytes > thresholds.large_segment_threshold:
            large += 1
    return SegmentWarnings(high_segment_indices=high, small_segment_indices=small, large_segment_indices=large)
