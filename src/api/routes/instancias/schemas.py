"""Modelos de request das rotas de instância.

Aceitam tanto `sessionId` quanto `nm_instancia` para o identificador
da instância.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

_SESSION_ALIASES = AliasChoices("sessionId", "nm_instancia")


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class CreateInstanceRequest(_RequestModel):
    nome: str = Field(
        min_length=1,
        validation_alias=AliasChoices("nome", "nm_instancia", "sessionId"),
    )


class SessionRequest(_RequestModel):
    session_id: str = Field(min_length=1, validation_alias=_SESSION_ALIASES)


class SendMessageRequest(SessionRequest):
    """Mensagem de texto para contato (`number`) ou grupo (`groupId`)."""

    number: str | None = None
    group_id: str | None = Field(default=None, validation_alias=AliasChoices("groupId", "group_id"))
    message: str = Field(min_length=1)

    @model_validator(mode="after")
    def _one_recipient(self) -> SendMessageRequest:
        if bool(self.number) == bool(self.group_id):
            raise ValueError("Informe exatamente um destinatário: number ou groupId.")
        return self

    @property
    def is_group(self) -> bool:
        return bool(self.group_id)

    @property
    def recipient(self) -> str:
        return self.group_id or self.number or ""


class MentionMessageRequest(SendMessageRequest):
    mentions: list[str] = Field(default_factory=list)


class ListMessageRequest(SessionRequest):
    number: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    button_text: str = Field(min_length=1, validation_alias=AliasChoices("buttonText", "button_text"))
    footer_text: str | None = Field(
        default=None, validation_alias=AliasChoices("footerText", "footer_text")
    )
    sections: list[dict[str, Any]] = Field(min_length=1)


class CreateGroupRequest(SessionRequest):
    subject: str = Field(min_length=1)
    participants: list[str] = Field(min_length=1)


class AddParticipantRequest(SessionRequest):
    group_id: str = Field(min_length=1, validation_alias=AliasChoices("groupId", "group_id"))
    participant: str = Field(min_length=1)
