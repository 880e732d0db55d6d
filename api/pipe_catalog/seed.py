# pipe_catalog/seed.py
"""
Sample collection loader.

    python -m pipe_catalog.seed

Creates missing tables and inserts the sample items. Rows are keyed by fixed
ids, so running it again leaves existing rows untouched.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from pipe_catalog.database import (
    Base, close_db, create_tables, get_session_context, get_sessionmaker, init_db,
)
from pipe_catalog.db_models import Accessory, Image, ItemType, Pipe, Rating, Tobacco
from pipe_catalog.logging_setup import setup_logging
from pipe_catalog.settings import settings

logger = logging.getLogger(__name__)

SAMPLE_PIPES: List[Dict[str, Any]] = [
    dict(
        id="seedpipe0001", name="Cachimbo Clássico Inglês", brand="Peterson",
        material="Briar", shape="Bent", finish="Natural", filter_type="Sem filtro",
        stem_material="Vulcanite", country="Irlanda",
        observations="Um cachimbo clássico inspirado no famoso detetive.",
    ),
    dict(
        id="seedpipe0002", name="Cachimbo Rústico Italiano", brand="Savinelli",
        material="Briar", shape="Straight", finish="Rusticado", filter_type="9mm",
        stem_material="Acrílico", country="Itália",
        observations="Cachimbo com acabamento rústico tradicional.",
    ),
]

SAMPLE_TOBACCOS: List[Dict[str, Any]] = [
    dict(
        id="seedtob00001", name="English Mixture", brand="Dunhill", blend_type="English",
        contents="Virginia, Latakia, Oriental", cut="Ribbon", strength=3, room_note=4, taste=4,
        observations="Um blend inglês clássico e bem equilibrado.",
    ),
    dict(
        id="seedtob00002", name="Virginia Flake", brand="Mac Baren", blend_type="Virginia",
        contents="100% Virginia", cut="Flake", strength=2, room_note=3, taste=3,
        observations="Virginia puro em formato flake, doce e suave.",
    ),
]

SAMPLE_ACCESSORIES: List[Dict[str, Any]] = [
    dict(
        id="seedacc00001", name="Tamper de Madeira", brand="Peterson", category="Ferramenta",
        description="Tamper de madeira nobre com detalhes em prata",
        observations="Ideal para compactar o tabaco no fornilho.",
    ),
]

SAMPLE_RATINGS: List[Dict[str, Any]] = [
    dict(id="seedrate0001", item_id="seedpipe0001", item_type=ItemType.pipe, rating=5, session_id="seed"),
    dict(id="seedrate0002", item_id="seedpipe0001", item_type=ItemType.pipe, rating=4, session_id="seed"),
    dict(id="seedrate0003", item_id="seedtob00001", item_type=ItemType.tobacco, rating=4, session_id="seed"),
]

SAMPLE_IMAGES: List[Dict[str, Any]] = [
    dict(id="seedimg00001", item_id="seedpipe0001", item_type=ItemType.pipe,
         filename="peterson-bent.jpg", is_featured=True),
    dict(id="seedimg00002", item_id="seedpipe0001", item_type=ItemType.pipe,
         filename="peterson-bent-side.jpg", is_featured=False, sort_order=1),
]

SAMPLE_DATA: Tuple[Tuple[Type[Base], List[Dict[str, Any]]], ...] = (
    (Pipe, SAMPLE_PIPES),
    (Tobacco, SAMPLE_TOBACCOS),
    (Accessory, SAMPLE_ACCESSORIES),
    (Rating, SAMPLE_RATINGS),
    (Image, SAMPLE_IMAGES),
)


async def seed(
    sessions: Optional[async_sessionmaker[AsyncSession]] = None,
    engine: Optional[AsyncEngine] = None,
) -> Dict[str, int]:
    """Create tables and insert missing sample rows. Returns rows created per table."""
    await create_tables(engine)
    if sessions is None:
        sessions = await get_sessionmaker()

    created: Dict[str, int] = {}
    async with get_session_context(sessions) as db:
        for model, rows in SAMPLE_DATA:
            n = 0
            for row in rows:
                if await db.get(model, row["id"]) is None:
                    db.add(model(**row))
                    n += 1
            created[model.__tablename__] = n
            await db.flush()

    for table, n in created.items():
        logger.info("seed %s: %s new rows", table, n)
    return created


async def _main() -> None:
    await init_db()
    try:
        await seed()
    finally:
        await close_db()


if __name__ == "__main__":
    setup_logging(settings)
    asyncio.run(_main())
