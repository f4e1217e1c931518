# escope/datasource.py
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from .errors import OperationTimeoutError


class ClusterDataSource(ABC):
    """
    Capacidad de solo lectura sobre la API REST del clúster.

    Cada operación devuelve el JSON ya decodificado (dict, o list para los
    endpoints `_cat`) o lanza `DataSourceError`. Ninguna reintenta.
    `timeout` es el plazo en segundos de esa petición; None usa el de la fuente.
    """

    @abstractmethod
    def get_cluster_health(self, timeout: Optional[float] = None) -> Dict[str, Any]: ...

    @abstractmethod
    def get_cluster_stats(self, timeout: Optional[float] = None) -> Dict[str, Any]: ...

    @abstractmethod
    def get_nodes(self, timeout: Optional[float] = None) -> Dict[str, Any]: ...

    @abstractmethod
    def get_nodes_stats(self, timeout: Optional[float] = None) -> Dict[str, Any]: ...

    @abstractmethod
    def get_shards(self, timeout: Optional[float] = None) -> List[Any]: ...

    @abstractmethod
    def get_indices(self, timeout: Optional[float] = None) -> List[Any]: ...

    @abstractmethod
    def get_index_stats(self, index: str = "", timeout: Optional[float] = None) -> Dict[str, Any]:
        """Estadísticas de un índice; cadena vacía significa todos los índices."""


class DeadlineDataSource(ClusterDataSource):
    """
    Envuelve otra fuente y reparte un único plazo entre todas sus peticiones.

    Cada petición recibe como timeout el tiempo que queda; si ya no queda,
    lanza `OperationTimeoutError` sin llegar a pedir nada.
    """
    def __init__(self, source: ClusterDataSource, timeout: float,
                 clock: Callable[[], float] = time.monotonic):
        self.source = source
        self.clock = clock
        self.deadline = clock() + timeout

    def remaining(self, operation: str, timeout: Optional[float] = None) -> float:
        remaining = self.deadline - self.clock()
        if remaining <= 0:
            raise OperationTimeoutError(operation)
        return min(remaining, timeout) if timeout else remaining

    def get_cluster_health(self, timeout=None):
        return self.source.get_cluster_health(timeout=self.remaining("Cluster health request", timeout))

    def get_cluster_stats(self, timeout=None):
        return self.source.get_cluster_stats(timeout=self.remaining("Cluster stats request", timeout))

    def get_nodes(self, timeout=None):
        return self.source.get_nodes(timeout=self.remaining("Nodes request", timeout))

    def get_nodes_stats(self, timeout=None):
        return self.source.get_nodes_stats(timeout=self.remaining("Nodes stats request", timeout))

    def get_shards(self, timeout=None):
        return self.source.get_shards(timeout=self.remaining("Shards request", timeout))

    def get_indices(self, timeout=None):
        return self.source.get_indices(timeout=self.remaining("Indices request", timeout))

    def get_index_stats(self, index="", timeout=None):
        return self.source.get_index_stats(index, timeout=self.remaining("Index stats request", timeout))
