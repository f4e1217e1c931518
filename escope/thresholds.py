# escope/thresholds.py
"""
Umbrales de alerta que escalan con el tamaño del clúster.

Un clúster grande tolera proporcionalmente más uso por nodo y más segmentos
antes de que el mismo síntoma indique un problema real. Cada umbral crece en
escalones por nodo adicional y tiene su propio tope.
"""
import logging

from . import constants as c
from .datasource import ClusterDataSource
from .decoder import get_int
from .models import DynamicThresholds


def _scaled(base: float, step: float, cap: float, node_count: int) -> float:
    return min(cap, base + (node_count - 1) * step)


def segment_threshold(node_count: int) -> int:
    # 1 nodo = 1000, 3 nodos = 2000, 10 nodos = 5500
    return int(c.BASE_SEGMENT_THRESHOLD * (1 + (node_count - 1) * c.SEGMENT_SCALE_PER_NODE))


def cpu_threshold(node_count: int) -> float:
    return _scaled(c.CPU_THRESHOLD_BASE, c.CPU_THRESHOLD_STEP, c.CPU_THRESHOLD_CAP, node_count)


def memory_threshold(node_count: int) -> float:
    return _scaled(c.MEMORY_THRESHOLD_BASE, c.MEMORY_THRESHOLD_STEP, c.MEMORY_THRESHOLD_CAP, node_count)


def heap_threshold(node_count: int) -> float:
    return _scaled(c.HEAP_THRESHOLD_BASE, c.HEAP_THRESHOLD_STEP, c.HEAP_THRESHOLD_CAP, node_count)


def compute_thresholds(node_count: int) -> DynamicThresholds:
    node_count = max(1, node_count)
    return DynamicThresholds(
        high_segment_threshold=segment_threshold(node_count),
        small_segment_threshold=c.SMALL_SEGMENT_THRESHOLD,
        large_segment_threshold=c.LARGE_SEGMENT_THRESHOLD,
        high_cpu_threshold=cpu_threshold(node_count),
        high_memory_threshold=memory_threshold(node_count),
        high_heap_threshold=heap_threshold(node_count),
        high_disk_threshold=c.HIGH_DISK_THRESHOLD,
    )


def static_thresholds() -> DynamicThresholds:
    return DynamicThresholds(
        high_segment_threshold=c.HIGH_SEGMENT_THRESHOLD,
        small_segment_threshold=c.SMALL_SEGMENT_THRESHOLD,
        large_segment_threshold=c.LARGE_SEGMENT_THRESHOLD,
        high_cpu_threshold=c.HIGH_CPU_THRESHOLD,
        high_memory_threshold=c.HIGH_MEMORY_THRESHOLD,
        high_heap_threshold=c.HIGH_HEAP_THRESHOLD,
        high_disk_threshold=c.HIGH_DISK_THRESHOLD,
    )


def thresholds_for_cluster(source: ClusterDataSource) -> DynamicThresholds:
    """Lee el número de nodos de `_cluster/health`; 1 si no viene informado."""
    health = source.get_cluster_health()
    node_count = get_int(health, "number_of_nodes") or 1
    logging.debug(f"Umbrales dinámicos calculados para {node_count} nodos")
    return compute_thresholds(node_count)
