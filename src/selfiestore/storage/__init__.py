"""Storage layer: JSON record catalog + cached image files."""

from .blobs import BlobCache
from .catalog import RecordCatalog
from .layout import image_filename, metadata_filename
from .store import SelfieStore

__all__ = [
    "BlobCache",
    "RecordCatalog",
    "SelfieStore",
    "image_filename",
    "metadata_filename",
]
