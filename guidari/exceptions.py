from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger(__name__)


class GuidariError(Exception):
    """Error de dominio con código HTTP asociado."""

    status_code = 400
    error_type = "domain_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailure(GuidariError):
    """Datos de formulario incompletos o mal formados. Se aborta antes de mutar estado."""

    status_code = 400
    error_type = "validation_error"


class AuthenticationFailed(GuidariError):
    status_code = 401
    error_type = "authentication_error"


class PermissionDenied(GuidariError):
    status_code = 403
    error_type = "permission_error"


class NotFound(GuidariError):
    status_code = 404
    error_type = "not_found"


class SyncFailed(GuidariError):
    """El almacén remoto no confirmó una operación que no es optimista (eliminación)."""

    status_code = 502
    error_type = "sync_error"

    def __init__(self, message: str, reason: str = "unexpected"):
        super().__init__(message)
        self.reason = reason


def _error_response(status_code: int, message, error_type: str, **extra) -> JSONResponse:
    content = {"error": True, "message": message, "type": error_type}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GuidariError)
    async def domain_exception_handler(request: Request, exc: GuidariError):
        logger.warning(f"{exc.error_type}: {exc.message}")
        return _error_response(exc.status_code, exc.message, exc.error_type)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Solo loguear como ERROR si es un error del servidor (5xx)
        if exc.status_code >= 500:
            logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
        elif exc.status_code >= 400:
            logger.warning(f"HTTP Exception: {exc.status_code} - {exc.detail}")

        return _error_response(exc.status_code, exc.detail, "http_error")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Errores de validación son errores del cliente, no del servidor
        logger.warning(f"Validation Error: {exc.errors()}")
        return _error_response(
            422,
            "Error de validación en los datos enviados",
            "validation_error",
            details=jsonable_errors(exc),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected Error: {str(exc)}", exc_info=True)
        return _error_response(500, "Error interno del servidor", "internal_error")


def jsonable_errors(exc: RequestValidationError) -> list:
    # ctx puede contener excepciones no serializables
    errors = []
    for err in exc.errors():
        err = dict(err)
        err.pop("ctx", None)
        err.pop("input", None)
        errors.append(err)
    return errors
