#!/usr/bin/env python3
"""Cria a tabela whatsapp_instancias no PostgreSQL configurado (DB_*).

Uso:
    python scripts/create_tables.py
    python scripts/create_tables.py --drop   # apenas em development

Idempotente: CREATE TABLE só cria tabelas ausentes.
"""

from __future__ import annotations

import argparse
import asyncio

from app.bootstrap.clients import create_db_engine, dispose_db_engine
from app.infra.stores.models import Base
from config.settings import get_base_settings


async def create_tables(*, drop_first: bool) -> None:
    engine = create_db_engine()
    try:
        async with engine.begin() as conn:
            if drop_first:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await dispose_db_engine()


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Remove as tabelas antes de recriar (perde dados; só em development).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.drop and not get_base_settings().is_development:
        raise SystemExit("--drop só é permitido com ENVIRONMENT=development")
    asyncio.run(create_tables(drop_first=args.drop))
    tables = ", ".join(sorted(Base.metadata.tables))
    print(f"[{'drop+create' if args.drop else 'create'}] tabelas: {tables}")


if __name__ == "__main__":
    main()
