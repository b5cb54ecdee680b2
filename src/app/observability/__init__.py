"""Observabilidade — correlation_id e log estruturado de requisições.

Uso:
    from app.observability import get_correlation_id, set_correlation_id
"""

from app.observability.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.middleware import CorrelationMiddleware

__all__ = [
    "CORRELATION_HEADER",
    "CorrelationMiddleware",
    "generate_correlation_id",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
