import json
import os
import tempfile
from pathlib import Path

from docs_admin.errors import StorageError
from docs_admin.storage.base import Collection, Record, StorageBackend


class FileCollection(Collection):
    def __init__(self, name: str, path: Path) -> None:
        super().__init__(name)
        self.path = path

    def _read(self) -> list[Record]:
        if not self.path.exists():
            return []
        with self.path.open("r", encoding="utf-8") as handle:
            return json.load(handle)

    def _write(self, records: list[Record]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
                encoding="utf-8",
            ) as handle:
                json.dump(records, handle, indent=2, ensure_ascii=False)
                temp_path = Path(handle.name)
        except OSError as exc:
            raise StorageError(f"Failed to save {self.name}") from exc
        try:
            os.replace(temp_path, self.path)
        except OSError as exc:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(f"Failed to save {self.name}") from exc


class FileBackend(StorageBackend):
    storage_type = "Local File Storage"

    def __init__(self, directory: str | Path) -> None:
        super().__init__()
        self.directory = Path(directory)

    def _open(self, name: str) -> Collection:
        return FileCollection(name, self.directory / f"{name}.json")
