# escope/monitoring.py
import re
import time
import logging
import threading
from typing import Callable, Optional

from .constants import DEFAULT_INTERVAL
from .errors import InvalidDurationError, InvalidIntervalError
from .models import MonitoringResult

_UNITS = {
    "ns": 1e-9, "us": 1e-6, "µs": 1e-6, "ms": 1e-3,
    "s": 1.0, "m": 60.0, "h": 3600.0,
}
_COMPONENT = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')


def parse_duration(value: str) -> float:
    """
    Convierte "5s", "1m", "1h30m" o "1.5s" a segundos.

    Lanza ValueError si el texto no es una secuencia de <número><unidad> o si
    el resultado no es positivo.
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty duration")
    position, seconds = 0, 0.0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if not match:
            raise ValueError(f"invalid duration {value!r}")
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if seconds <= 0:
        raise ValueError(f"duration must be positive: {value!r}")
    return seconds


class ContinuousSampler:
    """
    Repite un ciclo de diagnóstico completo cada `interval` segundos hasta
    agotar `duration` o hasta que se llame a `cancel()`.

    Solo se cuenta cuántos ciclos se completaron; los resultados de cada ciclo
    se descartan. Un ciclo empieza únicamente mientras el tiempo transcurrido
    sea estrictamente menor que la duración, y el primero en t=0: con 10s y
    2s se obtienen exactamente 5 muestras. La cancelación se comprueba entre
    ciclos; un ciclo en curso no se interrumpe.
    """
    def __init__(self, cycle: Callable[[], object], clock: Callable[[], float] = time.monotonic,
                 stop_event: Optional[threading.Event] = None):
        self.cycle = cycle
        self.clock = clock
        self.stop_event = stop_event or threading.Event()

    def cancel(self):
        self.stop_event.set()

    @property
    def cancelled(self) -> bool:
        return self.stop_event.is_set()

    def run(self, duration: float, interval: float) -> MonitoringResult:
        start = self.clock()
        samples = 0
        logging.info(f"Monitoreo continuo iniciado: duración={duration}s intervalo={interval}s")
        while not self.cancelled and self.clock() - start < duration:
            self.cycle()
            samples += 1
            logging.debug(f"Muestra {samples} completada")
            remaining = duration - (self.clock() - start)
            if remaining <= 0:
                break
            # wait() devuelve True si se canceló durante la espera
            if self.stop_event.wait(min(interval, remaining)):
                break
        state = "cancelado" if self.cancelled else "completado"
        logging.info(f"Monitoreo continuo {state} con {samples} muestras")
        return MonitoringResult(sample_count=samples)


def parse_monitoring_window(duration: str, interval: Optional[str], max_duration: Optional[float] = None):
    """
    Valida ambos textos antes de muestrear. Devuelve (duración, intervalo) en segundos.
    Con `max_duration` se rechazan ventanas más largas que ese tope.
    """
    try:
        duration_s = parse_duration(duration)
    except ValueError as e:
        raise InvalidDurationError(f"Invalid duration format: {e}. Valid formats: 1m, 5m, 1h") from e
    if max_duration is not None and duration_s > max_duration:
        raise InvalidDurationError(f"Duration {duration} exceeds the maximum of {max_duration:g}s")
    try:
        interval_s = parse_duration(interval or DEFAULT_INTERVAL)
    except ValueError as e:
        raise InvalidIntervalError(f"Invalid interval format: {e}. Valid formats: 5s, 10s, 1m") from e
    return duration_s, interval_s


def start_continuous_monitoring(cycle: Callable[[], object], duration: str, interval: Optional[str] = None,
                                max_duration: Optional[float] = None,
                                clock: Callable[[], float] = time.monotonic,
                                stop_event: Optional[threading.Event] = None) -> MonitoringResult:
    duration_s, interval_s = parse_monitoring_window(duration, interval, max_duration)
    return ContinuousSampler(cycle, clock=clock, stop_event=stop_event).run(duration_s, interval_s)
