from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from docs_admin.database import (
    create_db_engine,
    create_session_factory,
    init_db,
    session_scope,
)
from docs_admin.errors import StorageError
from docs_admin.models.config_item import ConfigItem
from docs_admin.storage.base import Collection, Record, StorageBackend, utcnow


class ManagedConfigCollection(Collection):
    def __init__(self, name: str, session_factory: sessionmaker) -> None:
        super().__init__(name)
        self._session_factory = session_factory

    def _read(self) -> list[Record]:
        with session_scope(self._session_factory) as session:
            item = session.execute(
                select(ConfigItem).where(ConfigItem.key == self.name)
            ).scalar_one_or_none()
            if item is None:
                return []
            return list(item.value or [])

    def _write(self, records: list[Record]) -> None:
        try:
            with session_scope(self._session_factory) as session:
                item = session.get(ConfigItem, self.name)
                if item is None:
                    session.add(
                        ConfigItem(key=self.name, value=records, updated_at=utcnow())
                    )
                else:
                    item.value = records
                    item.updated_at = utcnow()
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to save {self.name}") from exc


class ManagedConfigBackend(StorageBackend):
    """Key-value config store: one row per collection holding a JSON array."""

    storage_type = "Managed Config Store"

    def __init__(self, url: str) -> None:
        super().__init__()
        self.engine = create_db_engine(url)
        init_db(self.engine)
        self._session_factory = create_session_factory(self.engine)

    def _open(self, name: str) -> Collection:
        return ManagedConfigCollection(name, self._session_factory)
