"""Opaque key-value blob store on top of the kv_store table."""

import logging
from typing import Iterable, Optional

from sqlalchemy import bindparam, text

from steadydad.core.database import get_database

logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self):
        self.database = get_database()

    # Used by: babies_data.py, live_activity.py (ActivityHandleStore)
    async def get_item(self, key: str) -> Optional[str]:
        async with self.database.session() as session:
            result = await session.execute(
                text("SELECT value FROM kv_store WHERE key = :key"),
                {"key": key},
            )
            row = result.first()
            return row[0] if row else None

    # Used by: babies_data.py, live_activity.py (ActivityHandleStore)
    async def set_item(self, key: str, value: str) -> None:
        async with self.database.session() as session:
            await session.execute(
                text('''
                    INSERT INTO kv_store (key, value)
                    VALUES (:key, :value)
                    ON CONFLICT (key)
                    DO UPDATE SET value = EXCLUDED.value
                '''),
                {"key": key, "value": value},
            )
            await session.commit()

    # Used by: live_activity.py (ActivityHandleStore)
    async def remove_item(self, key: str) -> None:
        async with self.database.session() as session:
            await session.execute(
                text("DELETE FROM kv_store WHERE key = :key"),
                {"key": key},
            )
            await session.commit()

    # Used by: babies_data.py (reset_all_data)
    async def multi_remove(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        async with self.database.session() as session:
            result = await session.execute(
                text("DELETE FROM kv_store WHERE key IN :keys").bindparams(
                    bindparam("keys", expanding=True)
                ),
                {"keys": keys},
            )
            await session.commit()
            logger.info(f"Removed {result.rowcount} stored keys")
            return result.rowcount
