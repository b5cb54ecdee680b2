"""Rotas HTTP da API.

Responsabilidades:
- Definir endpoints HTTP (instâncias, health)
- Validação inicial de request (pydantic)
- Delegação para o gerenciador de conexões e use cases
- Respostas HTTP apropriadas

Estrutura:
- routes/instancias/: endpoints /api/whatsapp
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
- error_handlers.py: exceções de domínio → JSON
"""

from __future__ import annotations

from api.routes.error_handlers import register_exception_handlers
from api.routes.router import create_api_router

__all__ = ["create_api_router", "register_exception_handlers"]
