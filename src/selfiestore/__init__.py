"""Selfie record + image store."""

from .codec import JpegCodec
from .config import StoreConfig, load_config
from .errors import (
    DecodingError,
    DeletionError,
    EncodingError,
    EnumerationError,
    PersistenceError,
    SelfieStoreError,
)
from .schemas import Selfie
from .storage import BlobCache, RecordCatalog, SelfieStore

__all__ = [
    "BlobCache",
    "DecodingError",
    "DeletionError",
    "EncodingError",
    "EnumerationError",
    "JpegCodec",
    "PersistenceError",
    "RecordCatalog",
    "Selfie",
    "SelfieStore",
    "SelfieStoreError",
    "StoreConfig",
    "load_config",
]
