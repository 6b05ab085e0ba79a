from app.repositories.storage.files import TempFileStore
from app.repositories.storage.s3 import ObjectStore

__all__ = ["ObjectStore", "TempFileStore"]
