# escope/check_service.py
import functools
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from typing import Callable, Dict, List, Optional, Tuple

from .config import CHECK_TIMEOUT
from .constants import MSG_TIMEOUT_GENERIC
from .datasource import ClusterDataSource, DeadlineDataSource
from .errors import DataSourceError, OperationTimeoutError
from .health import HealthAggregator
from .models import (
    CheckReport, ClusterInfo, IndexHealth, NodeBreakdown, NodeHealth, Performance,
    ResourceUsage, ScaleWarnings, SegmentWarnings, ShardHealth, ShardWarnings,
)
from .scaling import ShardScalingAdvisor
from .thresholds import static_thresholds, thresholds_for_cluster
from . import warning_analyzer


def bounded_check(name: str):
    """
    Limita un chequeo completo a `check_timeout` segundos, con todas sus peticiones.

    El chequeo corre en un hilo aparte sobre una `DeadlineDataSource`. Si se
    pasa del plazo se lanza `OperationTimeoutError` y el hilo abandonado deja
    de pedir datos en cuanto se agota el plazo de la fuente.
    """
    def decorator(check):
        @functools.wraps(check)
        def wrapper(self):
            if self.check_timeout is None:
                return check(self)
            bounded = CheckService(DeadlineDataSource(self.source, self.check_timeout), check_timeout=None)
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="escope-check")
            try:
                future = executor.submit(check, bounded)
                return future.result(timeout=self.check_timeout)
            except FuturesTimeoutError:
                logging.warning(f"{name} superó el plazo de {self.check_timeout}s")
                raise OperationTimeoutError(name) from None
            finally:
                executor.shutdown(wait=False)
        return wrapper
    return decorator


class CheckService:
    """Los diez chequeos independientes sobre una fuente de datos."""
    def __init__(self, source: ClusterDataSource, check_timeout: Optional[float] = CHECK_TIMEOUT):
        self.source = source
        self.check_timeout = check_timeout
        self.aggregator = HealthAggregator(source)
        self.advisor = ShardScalingAdvisor(self.aggregator)

    @bounded_check("Cluster health check")
    def cluster_health_check(self) -> ClusterInfo:
        return self.aggregator.cluster_info()

    @bounded_check("Node health check")
    def node_health_check(self) -> List[NodeHealth]:
        return self.aggregator.node_health()

    @bounded_check("Shard health check")
    def shard_health_check(self) -> ShardHealth:
        return self.aggregator.shard_health()

    @bounded_check("Shard warnings check")
    def shard_warnings_check(self) -> ShardWarnings:
        return warning_analyzer.shard_warnings(self.aggregator.shards())

    @bounded_check("Index health check")
    def index_health_check(self) -> List[IndexHealth]:
        return self.aggregator.index_health()

    @bounded_check("Resource usage check")
    def resource_usage_check(self) -> ResourceUsage:
        return self.aggregator.resource_usage()

    @bounded_check("Performance check")
    def performance_check(self) -> Performance:
        return self.aggregator.performance()

    @bounded_check("Node breakdown check")
    def node_breakdown_check(self) -> NodeBreakdown:
        return self.aggregator.node_breakdown()

    @bounded_check("Segment warnings check")
    def segment_warnings_check(self) -> SegmentWarnings:
        stats = self.aggregator.index_stats()
        try:
            thresholds = thresholds_for_cluster(self.source)
        except DataSourceError as e:
            logging.warning(f"No se pudieron calcular umbrales dinámicos, se usan los estáticos: {e}")
            thresholds = static_thresholds()
        return warning_analyzer.segment_warnings(stats, thresholds)

    @bounded_check("Scale warnings check")
    def scale_warnings_check(self) -> ScaleWarnings:
        return self.advisor.scale_warnings()

    def checks(self) -> List[Tuple[str, str, Callable]]:
        """(campo del reporte, nombre visible, función) en orden de ejecución."""
        return [
            ("cluster_info", "Cluster health check", self.cluster_health_check),
            ("node_health", "Node health check", self.node_health_check),
            ("shard_health", "Shard health check", self.shard_health_check),
            ("shard_warnings", "Shard warnings check", self.shard_warnings_check),
            ("index_health", "Index health check", self.index_health_check),
            ("resource_usage", "Resource usage check", self.resource_usage_check),
            ("performance", "Performance check", self.performance_check),
            ("node_breakdown", "Node breakdown check", self.node_breakdown_check),
            ("segment_warnings", "Segment warnings check", self.segment_warnings_check),
            ("scale_warnings", "Scale warnings check", self.scale_warnings_check),
        ]

    def run_all_checks(self) -> CheckReport:
        """
        Ejecuta los chequeos en secuencia, cada uno con su propio plazo. Un fallo
        en uno no impide los demás: su hueco queda en None y el motivo en `failures`.
        """
        results: Dict[str, object] = {}
        failures: Dict[str, str] = {}
        for field, name, check in self.checks():
            try:
                results[field] = check()
            except OperationTimeoutError as e:
                logging.warning(f"{name} failed: {e}")
                failures[name] = MSG_TIMEOUT_GENERIC
            except DataSourceError as e:
                logging.warning(f"{name} failed: {e}")
                failures[name] = str(e)
        return CheckReport(**results, failures=failures)
