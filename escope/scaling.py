# escope/scaling.py
"""
Recomendación de número de shards primarios por índice.

Se combinan tres estimadores independientes (tamaño, tráfico y número de
documentos) con una media ponderada. La configuración actual se acepta si cae
dentro de ±40% de la recomendación; fuera de ese rango el índice se marca como
sobre- o infra-dimensionado. Las réplicas se revisan aparte.
"""
import logging
import math
from typing import Dict, NamedTuple, Optional, Tuple

from . import constants as c
from .decoder import IndexRecord, IndexStatsRecord
from .errors import DataSourceError
from .health import HealthAggregator
from .models import OverScaledIndex, ScaleWarnings, ShardRecommendation
from .warning_analyzer import is_system_index


class IndexTrafficRates(NamedTuple):
    search_rate: float = 0.0
    index_rate: float = 0.0

    @property
    def combined(self) -> float:
        return self.search_rate + self.index_rate


def calculate_traffic_rate(total: float, time_ms: float) -> float:
    """
    Operaciones por segundo a partir de contadores acumulados.

    Un shard recién creado o reubicado puede tener un tiempo acumulado casi
    nulo y dar tasas absurdas; en ese caso se usa la media diaria. Sin datos
    de tiempo se usa la media horaria.
    """
    if total > 0 and time_ms > 0:
        rate = total / (time_ms / 1000)
        if rate >= c.MAX_PLAUSIBLE_RATE:
            return total / c.SECONDS_PER_DAY
        return rate
    if total > 0:
        return total / c.SECONDS_PER_HOUR
    return 0.0


def index_traffic_rates(stats: Dict[str, IndexStatsRecord]) -> Dict[str, IndexTrafficRates]:
    return {
        name: IndexTrafficRates(
            search_rate=calculate_traffic_rate(record.query_total, record.query_time_ms),
            index_rate=calculate_traffic_rate(record.index_total, record.index_time_ms),
        )
        for name, record in stats.items()
    }


def _size_gb(size_bytes: int) -> float:
    return size_bytes / c.BYTES_IN_GB


def _round_half_up(value: float) -> int:
    return int(math.floor(round(value, 9) + 0.5))


def shards_by_size(index_size: int, node_count: int) -> int:
    if index_size <= 0:
        return 1
    shards = max(1, math.ceil(_size_gb(index_size) / c.TARGET_SHARD_SIZE_GB))
    if node_count > 0:
        shards = min(shards, node_count)
    return shards


def shards_by_traffic(traffic_rate: float) -> int:
    if traffic_rate <= 0 or traffic_rate < c.LOW_RATE_THRESHOLD:
        return 1
    if traffic_rate < c.MEDIUM_RATE_THRESHOLD:
        return 2
    if traffic_rate < c.HIGH_RATE_THRESHOLD:
        return 4
    if traffic_rate < c.VERY_HIGH_RATE_THRESHOLD:
        return 8
    return 12


def shards_by_doc_count(doc_count: int) -> int:
    if doc_count <= 0:
        return 1
    return max(1, math.ceil(doc_count / c.OPTIMAL_DOCS_PER_SHARD))


def select_weights(index_size: int, current_shards: int) -> Tuple[float, float, float]:
    """Pesos (tamaño, tráfico, documentos). Si el tamaño por shard ya es <= 60GB, el tamaño no cuenta."""
    if current_shards > 0 and index_size > 0:
        if _size_gb(index_size) / current_shards <= c.TARGET_SHARD_SIZE_GB:
            return 0.0, c.NO_SIZE_TRAFFIC_WEIGHT, c.NO_SIZE_DOC_COUNT_WEIGHT
    return c.SIZE_WEIGHT, c.TRAFFIC_WEIGHT, c.DOC_COUNT_WEIGHT


def calculate_confidence(index_size: int, traffic_rate: float, doc_count: int) -> float:
    confidence = 0.0
    if index_size > 0:
        confidence += 0.5
    if traffic_rate > 0:
        confidence += 0.3
    if doc_count > 0:
        confidence += 0.2
    return round(confidence, 2)


def confidence_label(confidence: float) -> str:
    if confidence >= c.HIGH_CONFIDENCE:
        return "HIGH"
    if confidence >= c.MEDIUM_CONFIDENCE:
        return "MEDIUM"
    return "LOW"


def build_reasoning(size_shards: int, traffic_shards: int, doc_shards: int,
                    index_size: int, traffic_rate: float, doc_count: int) -> str:
    reasons = []
    if index_size > 0:
        reasons.append(f"Size: {_size_gb(index_size):.1f}GB→{size_shards} shards")
    if traffic_rate > 0:
        reasons.append(f"Traffic: {traffic_rate:.1f}req/s→{traffic_shards} shards")
    if doc_count > 0:
        reasons.append(f"Docs: {doc_count // 1_000_000}M→{doc_shards} shards")
    if not reasons:
        return c.MSG_MINIMAL_DATA
    return "Based on " + ", ".join(reasons)


def recommend(index_size: int, traffic_rate: float, doc_count: int,
              node_count: int, current_shards: int) -> ShardRecommendation:
    size_shards = shards_by_size(index_size, node_count)
    traffic_shards = shards_by_traffic(traffic_rate)
    doc_shards = shards_by_doc_count(doc_count)
    size_weight, traffic_weight, doc_weight = select_weights(index_size, current_shards)

    recommended = _round_half_up(size_shards * size_weight + traffic_shards * traffic_weight
                                 + doc_shards * doc_weight)
    recommended = max(1, recommended)
    # Más shards que nodos no aporta nada
    if node_count > 0:
        recommended = min(recommended, node_count)

    min_acceptable = max(1, math.ceil(round(recommended * (1 - c.ACCEPTABLE_RANGE_FLEXIBILITY), 9)))
    max_acceptable = math.floor(round(recommended * (1 + c.ACCEPTABLE_RANGE_FLEXIBILITY), 9))

    return ShardRecommendation(
        recommended=recommended,
        min_acceptable=min_acceptable,
        max_acceptable=max_acceptable,
        confidence=calculate_confidence(index_size, traffic_rate, doc_count),
        reasoning=build_reasoning(size_shards, traffic_shards, doc_shards,
                                  index_size, traffic_rate, doc_count),
    )


def evaluate_index(index: IndexRecord, stats: Optional[IndexStatsRecord],
                   rates: Optional[IndexTrafficRates], node_count: int) -> Optional[OverScaledIndex]:
    """Devuelve el hallazgo para el índice, o None si no hay nada que señalar."""
    if is_system_index(index.index):
        return None

    index_size = stats.primary_size_bytes if stats else 0
    doc_count = stats.primary_doc_count if stats else 0
    if index_size < c.MIN_INDEX_SIZE_FOR_CHECK:
        return None

    primaries, replicas = index.primaries, index.replicas
    if primaries > 0 and _size_gb(index_size) / primaries <= c.TARGET_SHARD_SIZE_GB:
        return None

    rates = rates or IndexTrafficRates()
    recommendation = recommend(index_size, rates.combined, doc_count, node_count, primaries)

    warning_type, message = "", ""
    if primaries > recommendation.max_acceptable or primaries < recommendation.min_acceptable:
        warning_type = (c.WARNING_TYPE_OVER_SCALED if primaries > recommendation.max_acceptable
                        else c.WARNING_TYPE_UNDER_SCALED)
        message = c.MSG_SCALE_ISSUE.format(
            index=index.index, primaries=primaries, recommended=recommendation.recommended,
            minimum=recommendation.min_acceptable, maximum=recommendation.max_acceptable,
            label=confidence_label(recommendation.confidence), reasoning=recommendation.reasoning,
        )
    elif replicas > c.MAX_ACCEPTABLE_REPLICA_COUNT:
        warning_type = c.WARNING_TYPE_OVER_REPLICATED
        message = c.MSG_OVER_REPLICATED.format(index=index.index, replicas=replicas,
                                               optimal=c.OPTIMAL_REPLICA_COUNT)
    elif replicas < 1:
        warning_type = c.WARNING_TYPE_UNDER_REPLICATED
        message = c.MSG_UNDER_REPLICATED.format(index=index.index, optimal=c.OPTIMAL_REPLICA_COUNT)

    if not warning_type:
        return None

    return OverScaledIndex(
        name=index.index,
        primary_shards=primaries,
        replica_shards=replicas,
        total_shards=primaries * (replicas + 1),
        index_size=index_size,
        doc_count=doc_count,
        search_rate=rates.search_rate,
        index_rate=rates.index_rate,
        warning_type=warning_type,
        warning_message=message,
        recommendation=recommendation,
        severity=c.SEVERITY_WARNING,
    )


class ShardScalingAdvisor:
    def __init__(self, aggregator: HealthAggregator):
        self.aggregator = aggregator

    def scale_warnings(self) -> ScaleWarnings:
        indices = self.aggregator.indices()

        try:
            stats = self.aggregator.index_stats()
        except DataSourceError as e:
            logging.warning(f"Sin estadísticas de índices para el análisis de escala: {e}")
            stats = {}

        try:
            node_count = self.aggregator.node_count()
        except DataSourceError as e:
            logging.warning(f"Sin número de nodos para el análisis de escala: {e}")
            node_count = 0

        rates = index_traffic_rates(stats)
        findings = []
        for index in indices:
            finding = evaluate_index(index, stats.get(index.index), rates.get(index.index), node_count)
            if finding is not None:
                findings.append(finding)

        return ScaleWarnings(
            over_scaled_indices=findings,
            warning_issues=[finding.warning_message for finding in findings],
        )
