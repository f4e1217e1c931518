# escope/config.py
import os
import logging
from dotenv import load_dotenv
import urllib3

from .constants import DEFAULT_CHECK_TIMEOUT, DEFAULT_INTERVAL, DEFAULT_MAX_MONITOR_DURATION, DEFAULT_TIMEOUT

# --- Configuración Inicial ---
load_dotenv()

# Avisos de lectura de variables; se emiten en configure_logging(), no al importar
CONFIG_WARNINGS = []


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        CONFIG_WARNINGS.append(f"Valor inválido para {name}: {value!r}, se usa {default}")
        return default


# --- Conexión a Elasticsearch ---
ES_HOST = os.getenv("ES_HOST")
ES_USER = os.getenv("ES_USER")
ES_PASS = os.getenv("ES_PASS")
VERIFY_SSL = _env_bool("ES_VERIFY_SSL", False)
REQUEST_TIMEOUT = _env_float("ES_REQUEST_TIMEOUT", DEFAULT_TIMEOUT)
HEADERS = {'Content-Type': 'application/json'}

if not VERIFY_SSL:
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

# --- Parámetros de la Herramienta ---
CHECK_TIMEOUT = _env_float("ESCOPE_CHECK_TIMEOUT", DEFAULT_CHECK_TIMEOUT)
MONITOR_INTERVAL = os.getenv("ESCOPE_INTERVAL", DEFAULT_INTERVAL)
MAX_MONITOR_DURATION = _env_float("ESCOPE_MAX_MONITOR_DURATION", DEFAULT_MAX_MONITOR_DURATION)
LOG_LEVEL = os.getenv("ESCOPE_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("ESCOPE_LOG_FILE", "escope_debug.log")


def configure_logging():
    """Configura el logging de la aplicación (se llama desde la CLI y la API)."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
        filename=LOG_FILE,
        filemode='w'
    )
    while CONFIG_WARNINGS:
        logging.warning(CONFIG_WARNINGS.pop(0))
