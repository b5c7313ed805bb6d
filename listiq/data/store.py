"""Key-value persistence for the comparison workspace.

Values are opaque JSON strings; the workspace owns their shape.
"""

import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from listiq.models.db import Base, StateEntry

logger = logging.getLogger(__name__)


@runtime_checkable
class StateStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStateStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class SqlStateStore:
    def __init__(self, database_url: str):
        url = make_url(database_url)
        if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(database_url)
        Base.metadata.create_all(self.engine)
        self._session = sessionmaker(self.engine, expire_on_commit=False)

    def get(self, key: str) -> str | None:
        with self._session() as session:
            entry = session.get(StateEntry, key)
            return entry.value if entry else None

    def set(self, key: str, value: str) -> None:
        with self._session.begin() as session:
            entry = session.get(StateEntry, key)
            if entry is None:
                session.add(StateEntry(key=key, value=value))
            else:
                entry.value = value
        logger.debug("Persisted %s (%d bytes)", key, len(value))
