import logging

from docs_admin.config import Settings
from docs_admin.storage.base import StorageBackend
from docs_admin.storage.files import FileBackend
from docs_admin.storage.managed import ManagedConfigBackend
from docs_admin.storage.memory import MemoryBackend

LOGGER = logging.getLogger(__name__)


def build_backend(settings: Settings) -> StorageBackend:
    selected = settings.selected_backend()
    if selected == "managed":
        backend: StorageBackend = ManagedConfigBackend(settings.managed_config_url)
    elif selected == "file":
        backend = FileBackend(settings.storage_dir or ".storage")
    elif selected == "memory":
        backend = MemoryBackend()
    else:
        raise RuntimeError(f"Unknown STORAGE_BACKEND: {selected}")
    LOGGER.info("Using storage backend: %s", backend.storage_type)
    return backend
