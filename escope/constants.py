# escope/constants.py
# Tablas constantes: umbrales, nombres de campos de la API y formatos de mensajes.

# --- Monitoreo continuo ---
DEFAULT_INTERVAL = "2s"
DEFAULT_TIMEOUT = 5
DEFAULT_CHECK_TIMEOUT = 5
# Tope de la ventana de monitoreo expuesta por HTTP, en segundos
DEFAULT_MAX_MONITOR_DURATION = 600

# --- Estados y severidades ---
HEALTH_GREEN = "green"
HEALTH_YELLOW = "yellow"
HEALTH_RED = "red"

SEVERITY_CRITICAL = "CRITICAL"
SEVERITY_WARNING = "WARNING"

SHARD_STATE_STARTED = "STARTED"
SHARD_STATE_INITIALIZING = "INITIALIZING"
SHARD_STATE_RELOCATING = "RELOCATING"
SHARD_STATE_UNASSIGNED = "UNASSIGNED"

NODE_ROLE_DATA = "data"
NODE_ROLE_MASTER = "master"
NODE_ROLE_INGEST = "ingest"

DASH = "-"

# --- Umbrales estáticos (fallback cuando no se conoce el tamaño del clúster) ---
HIGH_SEGMENT_THRESHOLD = 50
SMALL_SEGMENT_THRESHOLD = 1024 * 1024
LARGE_SEGMENT_THRESHOLD = 1024 * 1024 * 1024
HIGH_CPU_THRESHOLD = 80.0
HIGH_MEMORY_THRESHOLD = 90.0
HIGH_HEAP_THRESHOLD = 85.0
HIGH_DISK_THRESHOLD = 90.0

# --- Umbrales dinámicos: base, paso por nodo adicional y tope ---
BASE_SEGMENT_THRESHOLD = 1000
SEGMENT_SCALE_PER_NODE = 0.5
CPU_THRESHOLD_BASE, CPU_THRESHOLD_STEP, CPU_THRESHOLD_CAP = 80.0, 2.0, 95.0
MEMORY_THRESHOLD_BASE, MEMORY_THRESHOLD_STEP, MEMORY_THRESHOLD_CAP = 90.0, 1.0, 98.0
HEAP_THRESHOLD_BASE, HEAP_THRESHOLD_STEP, HEAP_THRESHOLD_CAP = 85.0, 1.5, 95.0

BALANCE_RATIO_THRESHOLD = 0.7

# --- Réplicas ---
OPTIMAL_REPLICA_COUNT = 2
MAX_ACCEPTABLE_REPLICA_COUNT = 3

# --- Recomendación de shards ---
LOW_RATE_THRESHOLD = 10.0
MEDIUM_RATE_THRESHOLD = 100.0
HIGH_RATE_THRESHOLD = 1000.0
VERY_HIGH_RATE_THRESHOLD = 5000.0

OPTIMAL_DOCS_PER_SHARD = 10_000_000
TARGET_SHARD_SIZE_GB = 60.0

SIZE_WEIGHT = 0.5
TRAFFIC_WEIGHT = 0.3
DOC_COUNT_WEIGHT = 0.2
# Pesos cuando el tamaño por shard no es el cuello de botella
NO_SIZE_TRAFFIC_WEIGHT = 0.6
NO_SIZE_DOC_COUNT_WEIGHT = 0.4

ACCEPTABLE_RANGE_FLEXIBILITY = 0.4

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5

# Tasas por encima de esto se consideran absurdas (contadores recién creados)
MAX_PLAUSIBLE_RATE = 1_000_000
SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600

BYTES_IN_KB = 1024
BYTES_IN_MB = 1024 * 1024
BYTES_IN_GB = 1024 * 1024 * 1024
MIN_INDEX_SIZE_FOR_CHECK = 1 * BYTES_IN_GB

WARNING_TYPE_OVER_SCALED = "over-scaled"
WARNING_TYPE_UNDER_SCALED = "under-scaled"
WARNING_TYPE_OVER_REPLICATED = "over-replicated"
WARNING_TYPE_UNDER_REPLICATED = "under-replicated"

# --- Índices de sistema ---
DOT_PREFIX = "."
SYSTEM_INDEX_PREFIXES = (
    "kibana", "apm", "security", "monitoring", "watcher", "ilm", "slm", "transform",
)

# --- Mensajes ---
MSG_UNASSIGNED_SHARDS = "{count} unassigned shards detected"
MSG_INVESTIGATE_UNASSIGNED = "Investigate {count} unassigned shards with the _cluster/allocation/explain API"
MSG_RELOCATING_SHARDS = "{count} shards are relocating"
MSG_INITIALIZING_SHARDS = "{count} shards are initializing"
MSG_SHARD_UNBALANCED = "Shard distribution is unbalanced (ratio: {ratio:.2f})"
MSG_CONSIDER_REBALANCING = "Consider rebalancing shards across data nodes"
MSG_SHARD_HEALTHY = "Shard allocation looks healthy"
MSG_SCALE_ISSUE = (
    "{index} has {primaries} primary shards (recommended: {recommended}, "
    "acceptable range: {minimum}-{maximum}) [{label} confidence] - {reasoning}"
)
MSG_OVER_REPLICATED = "{index} has {replicas} replicas (optimal: {optimal})"
MSG_UNDER_REPLICATED = "{index} has no replicas (optimal: {optimal})"
MSG_MINIMAL_DATA = "Minimal data available"
MSG_TIMEOUT_GENERIC = "operation timed out"
MSG_NO_SAMPLES = "No samples collected during monitoring period."
