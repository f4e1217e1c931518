# escope/api.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from .check_service import CheckService
from .client import ElasticsearchClient
from .config import ES_HOST, ES_PASS, ES_USER, MAX_MONITOR_DURATION, VERIFY_SSL, configure_logging
from .constants import MSG_NO_SAMPLES
from .errors import DataSourceError, InvalidDurationError, InvalidIntervalError, OperationTimeoutError
from .monitoring import start_continuous_monitoring


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="escope Cluster Check API", lifespan=lifespan)


def get_check_service():
    client = ElasticsearchClient(ES_HOST, ES_USER, ES_PASS, VERIFY_SSL)
    try:
        client.check_connection()
    except DataSourceError as e:
        raise HTTPException(status_code=503, detail=f"No se pudo conectar a Elasticsearch: {e}")
    yield CheckService(client)


def _single(check):
    try:
        return check()
    except OperationTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/health", tags=["Sistema"])
def health_check():
    return {"status": "ok"}


@app.get("/api/v1/check", tags=["Chequeos"])
def ep_check(service: CheckService = Depends(get_check_service)):
    """Los diez chequeos; los fallidos aparecen en `failures`."""
    return service.run_all_checks()


@app.get("/api/v1/check/shard-warnings", tags=["Chequeos"])
def ep_shard_warnings(service: CheckService = Depends(get_check_service)):
    return _single(service.shard_warnings_check)


@app.get("/api/v1/check/segment-warnings", tags=["Chequeos"])
def ep_segment_warnings(service: CheckService = Depends(get_check_service)):
    return _single(service.segment_warnings_check)


@app.get("/api/v1/check/scale-warnings", tags=["Chequeos"])
def ep_scale_warnings(service: CheckService = Depends(get_check_service)):
    return _single(service.scale_warnings_check)


@app.get("/api/v1/monitor", tags=["Monitoreo"])
def ep_monitor(duration: str = Query(..., description="Ej.: 30s, 1m; como máximo ESCOPE_MAX_MONITOR_DURATION (10m por defecto)"),
               interval: Optional[str] = Query(None, description="Ej.: 2s, 5s (por defecto 2s)"),
               service: CheckService = Depends(get_check_service)):
    """Bloquea la petición durante toda la ventana; la duración admite como máximo MAX_MONITOR_DURATION."""
    try:
        result = start_continuous_monitoring(service.run_all_checks, duration, interval,
                                             max_duration=MAX_MONITOR_DURATION)
    except (InvalidDurationError, InvalidIntervalError) as e:
        raise HTTPException(status_code=422, detail=str(e))
    if result.sample_count == 0:
        return {"sample_count": 0, "message": MSG_NO_SAMPLES, "report": None}
    return {"sample_count": result.sample_count, "report": service.run_all_checks()}
