# escope/models.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReportModel(BaseModel):
    """Valor inmutable producido por un chequeo y consumido por el renderizado."""
    model_config = ConfigDict(frozen=True)


class DynamicThresholds(ReportModel):
    high_segment_threshold: int
    small_segment_threshold: int
    large_segment_threshold: int
    high_cpu_threshold: float
    high_memory_threshold: float
    high_heap_threshold: float
    high_disk_threshold: float


class ClusterInfo(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    cluster_name: str = ""
    status: str = ""
    number_of_nodes: int = 0
    active_primary_shards: int = 0
    active_shards: int = 0
    unassigned_shards: int = 0
    relocating_shards: int = 0
    initializing_shards: int = 0


class NodeHealth(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    node_id: str
    name: str = ""
    cpu_usage: float = 0.0
    heap_usage: float = 0.0


class ShardHealth(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    started_shards: int = 0
    initializing_shards: int = 0
    relocating_shards: int = 0
    unassigned_shards: int = 0


class ShardWarnings(ReportModel):
    unassigned_shards: int = 0
    relocating_shards: int = 0
    initializing_shards: int = 0
    # min/max de shards iniciados por nodo; 1.0 si hay menos de dos nodos
    unbalanced_ratio: float = Field(default=1.0, ge=0.0, le=1.0)
    unbalanced_shards: bool = False
    critical_issues: List[str] = Field(default_factory=list)
    warning_issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)


class IndexHealth(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    name: str = ""
    health: str = ""
    status: str = ""
    docs: str = ""
    size: str = ""


class ResourceUsage(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    node_count: int = 0
    cpu_usage: float = 0.0
    cpu_usage_min: float = 0.0
    cpu_usage_max: float = 0.0
    cpu_usage_min_node: str = ""
    cpu_usage_max_node: str = ""
    heap_usage: float = 0.0
    heap_usage_min: float = 0.0
    heap_usage_max: float = 0.0
    heap_usage_min_node: str = ""
    heap_usage_max_node: str = ""
    disk_total: int = 0
    disk_available: int = 0


class Performance(ReportModel):
    timestamp: datetime = Field(default_factory=datetime.now)
    index_total: int = 0
    index_time_in_millis: int = 0
    query_total: int = 0
    query_time_in_millis: int = 0


class NodeBreakdown(ReportModel):
    total: int = 0
    master: int = 0
    data: int = 0
    ingest: int = 0
    coordinating_only: int = 0


class SegmentWarnings(ReportModel):
    high_segment_indices: int = 0
    small_segment_indices: int = 0
    large_segment_indices: int = 0


class ShardRecommendation(ReportModel):
    recommended: int
    min_acceptable: int
    max_acceptable: int
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str


class OverScaledIndex(ReportModel):
    name: str
    primary_shards: int
    replica_shards: int
    total_shards: int
    index_size: int
    doc_count: int
    search_rate: float
    index_rate: float
    warning_type: str
    warning_message: str
    recommendation: ShardRecommendation
    severity: str


class ScaleWarnings(ReportModel):
    over_scaled_indices: List[OverScaledIndex] = Field(default_factory=list)
    warning_issues: List[str] = Field(default_factory=list)


class MonitoringResult(ReportModel):
    sample_count: int = 0


class CheckReport(ReportModel):
    """Resultado de una ejecución completa; los chequeos fallidos quedan en None."""
    generated_at: datetime = Field(default_factory=datetime.now)
    cluster_info: Optional[ClusterInfo] = None
    node_health: Optional[List[NodeHealth]] = None
    shard_health: Optional[ShardHealth] = None
    shard_warnings: Optional[ShardWarnings] = None
    index_health: Optional[List[IndexHealth]] = None
    resource_usage: Optional[ResourceUsage] = None
    performance: Optional[Performance] = None
    node_breakdown: Optional[NodeBreakdown] = None
    segment_warnings: Optional[SegmentWarnings] = None
    scale_warnings: Optional[ScaleWarnings] = None
    failures: Dict[str, str] = Field(default_factory=dict)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)
