"""Escopos de credenciais por instância."""

from app.infra.credentials.file_credential_store import FileCredentialStore

__all__ = ["FileCredentialStore"]
