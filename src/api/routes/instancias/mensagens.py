"""Rotas de envio de mensagens (texto, menção e lista interativa)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from api.normalizers.whatsapp import format_individual_jid, format_jid, format_mentions
from api.payload_builders.whatsapp import build_list_content, build_text_content
from api.routes.instancias.deps import get_send_message_use_case
from api.routes.instancias.schemas import (
    ListMessageRequest,
    MentionMessageRequest,
    SendMessageRequest,
)
from app.use_cases.whatsapp import SendMessageUseCase
from utils.errors import ValidationError

router = APIRouter()


async def _send_text(
    body: SendMessageRequest,
    use_case: SendMessageUseCase,
    *,
    mentions: list[str] | None = None,
    require_group: bool | None = None,
) -> None:
    if require_group is not None and body.is_group != require_group:
        field = "groupId" if require_group else "number"
        raise ValidationError(f"O campo {field} é obrigatório nesta rota.")
    jid = format_jid(body.recipient, is_group=body.is_group)
    content = build_text_content(body.message, format_mentions(mentions))
    await use_case.execute(
        body.session_id,
        jid,
        content,
        kind="mention" if mentions else "text",
    )


@router.post("/mensagem")
async def send_message(
    body: SendMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case)
    return {"message": "Mensagem enviada com sucesso."}


@router.post("/mensagem/pv")
async def send_private_message(
    body: SendMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case, require_group=False)
    return {"message": "Mensagem enviada com sucesso para PV."}


@router.post("/mensagem/grupo")
async def send_group_message(
    body: SendMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case, require_group=True)
    return {"message": "Mensagem enviada com sucesso para grupo."}


@router.post("/mensagem/mencao")
async def send_mention_message(
    body: MentionMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case, mentions=body.mentions)
    return {"message": "Mensagem com menção enviada."}


@router.post("/mensagem/mencao/pv")
async def send_private_mention_message(
    body: MentionMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case, mentions=body.mentions, require_group=False)
    return {"message": "Mensagem com menção enviada para PV."}


@router.post("/mensagem/mencao/grupo")
async def send_group_mention_message(
    body: MentionMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    await _send_text(body, use_case, mentions=body.mentions, require_group=True)
    return {"message": "Mensagem com menção enviada para grupo."}


@router.post("/mensagem/lista")
async def send_list_message(
    body: ListMessageRequest,
    use_case: SendMessageUseCase = Depends(get_send_message_use_case),
) -> dict[str, Any]:
    content = build_list_content(
        title=body.title,
        description=body.description,
        button_text=body.button_text,
        footer_text=body.footer_text,
        sections=body.sections,
    )
    await use_case.execute(
        body.session_id,
        format_individual_jid(body.number),
        content,
        kind="list",
    )
    return {"message": "Mensagem interativa enviada com sucesso."}
