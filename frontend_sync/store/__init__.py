from frontend_sync.store.base import FileStore
from frontend_sync.store.local import LocalFileStore

__all__ = ["FileStore", "LocalFileStore"]
