import copy

from docs_admin.storage.base import Collection, Record, StorageBackend


class MemoryCollection(Collection):
    def __init__(self, name: str, data: dict[str, list[Record]]) -> None:
        super().__init__(name)
        self._data = data

    def _read(self) -> list[Record]:
        return copy.deepcopy(self._data.get(self.name, []))

    def _write(self, records: list[Record]) -> None:
        self._data[self.name] = copy.deepcopy(records)


class MemoryBackend(StorageBackend):
    """Process-local store. Contents are lost on restart and not shared
    between worker processes."""

    storage_type = "Mock Storage (Development)"

    def __init__(self) -> None:
        super().__init__()
        self._data: dict[str, list[Record]] = {}

    def _open(self, name: str) -> Collection:
        return MemoryCollection(name, self._data)
