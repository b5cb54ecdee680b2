"""Entrypoint do serviço de instâncias WhatsApp.

Este módulo é o ponto de entrada principal do serviço.
Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 3000

Uso (desenvolvimento):
    uvicorn app.app:app --reload --host 0.0.0.0 --port 3000
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import create_api_router, register_exception_handlers
from app.bootstrap import initialize_app, validate_runtime_settings
from app.bootstrap.clients import dispose_db_engine
from app.bootstrap.dependencies import (
    create_client_factory,
    create_connection_manager,
    create_status_store,
)
from app.observability import CorrelationMiddleware
from config.logging import get_logger
from config.settings import get_base_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from app.sessions.manager import ConnectionManager

# Inicializar logging e dependências ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 10.0


async def _run_startup_reconnect(manager: ConnectionManager) -> None:
    try:
        await manager.reconnect_all_connected_on_startup()
    except asyncio.CancelledError:
        logger.info("startup_reconnect_cancelled")
        raise
    except Exception as exc:
        logger.error("startup_reconnect_failed", extra={"error_type": type(exc).__name__})


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Cria store de status e gerenciador de conexões
    - Agenda a reconexão das instâncias conectadas (sem bloquear o HTTP)

    Shutdown:
    - Cancela reconexões pendentes e fecha handles
    - Fecha o pool do banco
    """
    service = get_base_settings().service_name
    logger.info("app_starting", extra={"service": service})
    validate_runtime_settings()

    status_store = create_status_store()
    manager = create_connection_manager(status_store, create_client_factory())
    app.state.connection_manager = manager
    startup_task = asyncio.create_task(
        _run_startup_reconnect(manager),
        name="startup_reconnect",
    )

    yield

    logger.info("app_shutting_down", extra={"service": service})
    if not startup_task.done():
        startup_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await startup_task
    await asyncio.wait_for(manager.shutdown(), timeout=SHUTDOWN_TIMEOUT_SECONDS)
    await dispose_db_engine()


def create_app() -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="Instâncias WhatsApp",
        description="Gerenciador multi-instância de conexões WhatsApp",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.add_middleware(CorrelationMiddleware)
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(fastapi_app)
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": get_base_settings().service_name})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    settings = get_base_settings()
    logger.info("app_serving", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(
        "app.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
