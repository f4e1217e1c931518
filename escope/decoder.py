# escope/decoder.py
"""
Capa de decodificación defensiva.

La API devuelve árboles JSON sin tipo, con campos que pueden faltar o venir con
otro tipo según versión y estado del clúster. Aquí se traducen a registros
tipados; un campo ausente o con tipo inesperado se trata igual: valor cero.
Ninguna función de este módulo lanza excepciones por datos incompletos.
"""
import math
from typing import Any, Dict, List, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import DASH

Path = Union[str, Sequence[str]]


def _split(path: Path) -> Tuple[str, ...]:
    # Una tupla permite claves con punto, como "docs.count" de _cat/indices
    if isinstance(path, str):
        return tuple(path.split('.'))
    return tuple(path)


def get_path(tree: Any, path: Path, default: Any = None) -> Any:
    node = tree
    for key in _split(path):
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def get_str(tree: Any, path: Path) -> str:
    value = get_path(tree, path)
    return value if isinstance(value, str) else ""


def get_int(tree: Any, path: Path) -> int:
    value = get_path(tree, path)
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return 0


def get_float(tree: Any, path: Path) -> float:
    value = get_path(tree, path)
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)) and math.isfinite(value):
        return float(value)
    return 0.0


def get_map(tree: Any, path: Path) -> Dict[str, Any]:
    value = get_path(tree, path)
    return value if isinstance(value, dict) else {}


def get_list(tree: Any, path: Path) -> List[Any]:
    value = get_path(tree, path)
    return value if isinstance(value, list) else []


def get_count(tree: Any, path: Path) -> int:
    """Entero que los endpoints `_cat` pueden devolver como número o como texto."""
    count = get_int(tree, path)
    if count:
        return count
    text = get_str(tree, path).strip()
    try:
        return int(text)
    except ValueError:
        return 0


def _rows(raw: Any) -> List[Dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [row for row in raw if isinstance(row, dict)]


# --- Registros tipados ---

class Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ShardRecord(Record):
    index: str = ""
    shard: str = ""
    prirep: str = ""
    state: str = ""
    ip: str = ""
    node: str = ""

    @property
    def host(self) -> str:
        """Nodo que aloja el shard; la IP si no hay nombre, cadena vacía si no hay ninguno."""
        for candidate in (self.node, self.ip):
            if candidate and candidate != DASH:
                return candidate
        return ""


class IndexRecord(Record):
    index: str = ""
    health: str = ""
    status: str = ""
    docs_count: str = ""
    store_size: str = ""
    primaries: int = 0
    replicas: int = 0


class IndexStatsRecord(Record):
    name: str
    primary_size_bytes: int = 0
    primary_doc_count: int = 0
    total_size_bytes: int = 0
    segment_count: int = 0
    query_total: float = 0.0
    query_time_ms: float = 0.0
    index_total: float = 0.0
    index_time_ms: float = 0.0


class NodeStatsRecord(Record):
    node_id: str
    name: str = ""
    ip: str = ""
    roles: List[str] = Field(default_factory=list)
    cpu_percent: float = 0.0
    heap_used_percent: float = 0.0
    disk_total_bytes: int = 0
    disk_available_bytes: int = 0


class NodeInfoRecord(Record):
    node_id: str
    name: str = ""
    roles: List[str] = Field(default_factory=list)


def _roles(node: Dict[str, Any]) -> List[str]:
    return [role for role in get_list(node, "roles") if isinstance(role, str)]


def decode_shards(raw: Any) -> List[ShardRecord]:
    return [
        ShardRecord(
            index=get_str(row, "index"),
            shard=get_str(row, "shard"),
            prirep=get_str(row, "prirep"),
            state=get_str(row, "state"),
            ip=get_str(row, "ip"),
            node=get_str(row, "node"),
        )
        for row in _rows(raw)
    ]


def decode_indices(raw: Any) -> List[IndexRecord]:
    return [
        IndexRecord(
            index=get_str(row, "index"),
            health=get_str(row, "health"),
            status=get_str(row, "status"),
            docs_count=get_str(row, ("docs.count",)),
            store_size=get_str(row, ("store.size",)),
            primaries=get_count(row, "pri"),
            replicas=get_count(row, "rep"),
        )
        for row in _rows(raw)
    ]


def decode_index_stats(raw: Any) -> Dict[str, IndexStatsRecord]:
    records = {}
    for name, data in get_map(raw, "indices").items():
        if not isinstance(data, dict):
            continue
        records[name] = IndexStatsRecord(
            name=name,
            primary_size_bytes=get_int(data, "primaries.store.size_in_bytes"),
            primary_doc_count=get_int(data, "primaries.docs.count"),
            total_size_bytes=get_int(data, "total.store.size_in_bytes"),
            segment_count=get_int(data, "total.segments.count"),
            query_total=get_float(data, "total.search.query_total"),
            query_time_ms=get_float(data, "total.search.query_time_in_millis"),
            index_total=get_float(data, "total.indexing.index_total"),
            index_time_ms=get_float(data, "total.indexing.index_time_in_millis"),
        )
    return records


def decode_nodes_stats(raw: Any) -> List[NodeStatsRecord]:
    """Nodos ordenados por id para que el desempate de min/max sea reproducible."""
    records = []
    for node_id, node in sorted(get_map(raw, "nodes").items()):
        if not isinstance(node, dict):
            continue
        records.append(NodeStatsRecord(
            node_id=node_id,
            name=get_str(node, "name"),
            ip=get_str(node, "ip"),
            roles=_roles(node),
            cpu_percent=get_float(node, "os.cpu.percent"),
            heap_used_percent=get_float(node, "jvm.mem.heap_used_percent"),
            disk_total_bytes=get_int(node, "fs.total.total_in_bytes"),
            disk_available_bytes=get_int(node, "fs.total.available_in_bytes"),
        ))
    return records


def decode_nodes_info(raw: Any) -> List[NodeInfoRecord]:
    return [
        NodeInfoRecord(node_id=node_id, name=get_str(node, "name"), roles=_roles(node))
        for node_id, node in sorted(get_map(raw, "nodes").items())
        if isinstance(node, dict)
    ]
