"""Router das instâncias WhatsApp — agrega as rotas por assunto."""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.instancias.contatos import router as contatos_router
from api.routes.instancias.grupos import router as grupos_router
from api.routes.instancias.instancias import router as instancias_router
from api.routes.instancias.mensagens import router as mensagens_router

router = APIRouter()
router.include_router(instancias_router)
router.include_router(grupos_router)
router.include_router(contatos_router)
router.include_router(mensagens_router)
