# escope/errors.py
from .constants import MSG_TIMEOUT_GENERIC


class EscopeError(Exception):
    pass


class DataSourceError(EscopeError):
    """Fallo al consultar el clúster (red, autenticación, HTTP no-2xx o JSON inválido)."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed: {detail}" if detail else f"{operation} failed"
        super().__init__(message)


class OperationTimeoutError(DataSourceError):
    def __init__(self, operation: str):
        super().__init__(operation, MSG_TIMEOUT_GENERIC)


class InvalidDurationError(EscopeError, ValueError):
    pass


class InvalidIntervalError(EscopeError, ValueError):
    pass
