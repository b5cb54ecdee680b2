"""Testes do composition root e do lifespan da aplicação."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from app.app import create_app, lifespan
from app.bootstrap import collect_settings_errors, validate_runtime_settings
from app.bootstrap.clients import create_db_engine, create_db_session_factory
from app.bootstrap.dependencies import (
    create_client_factory,
    create_connection_manager,
    create_status_store,
)
from app.infra.stores import MemoryStatusStore, PostgresStatusStore
from app.sessions import ConnectionManager, InstanceStatus
from config.settings import (
    get_base_settings,
    get_database_settings,
    get_status_store_settings,
    get_whatsapp_settings,
)
from tests.fakes.fake_whatsapp_client import FakeClientFactory
from utils.errors import ClientFactoryNotConfiguredError

FAKE_FACTORY_PATH = "tests.fakes.fake_whatsapp_client:build_fake_factory"

_GETTERS = (
    get_base_settings,
    get_database_settings,
    get_status_store_settings,
    get_whatsapp_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Iterator[None]:
    for getter in _GETTERS:
        getter.cache_clear()
    yield
    for getter in _GETTERS:
        getter.cache_clear()


@pytest.fixture
def dev_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("ENVIRONMENT", "development")
    monkeypatch.setenv("STATUS_STORE_BACKEND", "memory")
    monkeypatch.setenv("WHATSAPP_CLIENT_FACTORY", FAKE_FACTORY_PATH)
    monkeypatch.setenv("WHATSAPP_AUTH_PATH", str(tmp_path))
    return tmp_path


class TestRuntimeValidation:
    """Validação estrita em staging/production."""

    def test_production_without_config_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("STATUS_STORE_BACKEND", "memory")
        monkeypatch.delenv("WHATSAPP_CLIENT_FACTORY", raising=False)

        with pytest.raises(RuntimeError, match="Configuração inválida para production"):
            validate_runtime_settings()

        errors = collect_settings_errors()
        assert any(error.startswith("status_store:") for error in errors)
        assert any(error.startswith("whatsapp:") for error in errors)

    def test_development_only_warns(self, dev_env: Path) -> None:
        validate_runtime_settings()
        assert collect_settings_errors() == []


class TestDependencies:
    """Factories de implementações concretas."""

    def test_memory_backend(self, dev_env: Path) -> None:
        assert isinstance(create_status_store(), MemoryStatusStore)

    def test_postgres_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STATUS_STORE_BACKEND", "postgres")
        assert isinstance(create_status_store(), PostgresStatusStore)
        create_db_session_factory.cache_clear()
        create_db_engine.cache_clear()

    def test_client_factory_from_env(self, dev_env: Path) -> None:
        factory = create_client_factory()

        manager = create_connection_manager(MemoryStatusStore(), factory)

        assert isinstance(factory, FakeClientFactory)
        assert isinstance(manager, ConnectionManager)
        assert manager.settings.auth_path == dev_env

    def test_missing_client_factory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WHATSAPP_CLIENT_FACTORY", raising=False)

        with pytest.raises(ClientFactoryNotConfiguredError):
            create_client_factory()


class TestLifespan:
    """Startup monta o gerenciador; shutdown preserva o status."""

    @pytest.mark.asyncio
    async def test_lifespan_builds_manager_and_shuts_down(self, dev_env: Path) -> None:
        app = create_app()

        async with lifespan(app):
            manager = app.state.connection_manager
            assert isinstance(manager, ConnectionManager)
            await manager.create("biz1")
            await manager.connect("biz1")

        assert manager.get_handle("biz1") is None
        record = await manager.get_status("biz1")
        assert record.status is InstanceStatus.DISCONNECTED
