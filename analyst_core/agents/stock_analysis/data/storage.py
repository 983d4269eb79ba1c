from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from analyst_core.infrastructure.database import AsyncSessionLocal
from analyst_core.infrastructure.models import KeyValueEntry


class DurableStorage(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...


@dataclass
class InMemoryStorage:
    """Process-local storage, used by tests and throwaway sessions."""

    values: dict[str, str] = field(default_factory=dict)

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value


@dataclass
class SqlKeyValueStorage:
    session_factory: async_sessionmaker[AsyncSession]

    async def get(self, key: str) -> str | None:
        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: str) -> None:
        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            if entry is None:
                session.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await session.commit()


def build_sql_storage() -> SqlKeyValueStorage:
    return SqlKeyValueStorage(session_factory=AsyncSessionLocal)
