"""Tradução de exceções de domínio para respostas JSON `{"error": ...}`."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from utils.errors import (
    InfrastructureError,
    InstanceError,
    UpstreamProtocolError,
)

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

INFRASTRUCTURE_ERROR_MESSAGE = "Serviço temporariamente indisponível."


async def instance_error_handler(request: Request, exc: InstanceError) -> JSONResponse:
    body: dict[str, Any] = {"error": exc.message}
    if isinstance(exc, UpstreamProtocolError) and exc.detail:
        body["detail"] = exc.detail
    logger.info(
        "http_error_response",
        extra={
            "path": request.url.path,
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=body)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = [_format_validation_error(error) for error in exc.errors()]
    logger.info(
        "http_request_invalid",
        extra={"path": request.url.path, "error_count": len(messages)},
    )
    return JSONResponse(status_code=400, content={"error": "; ".join(messages)})


async def infrastructure_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "http_infrastructure_error",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(status_code=503, content={"error": INFRASTRUCTURE_ERROR_MESSAGE})


def _format_validation_error(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    message = str(error.get("msg", "inválido"))
    return f"{'.'.join(location)}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InstanceError, instance_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(InfrastructureError, infrastructure_error_handler)
