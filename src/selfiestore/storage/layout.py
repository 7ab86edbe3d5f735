from __future__ import annotations

from pathlib import Path
from uuid import UUID

from ..errors import DeletionError

METADATA_SUFFIX = ".json"
IMAGE_MARKER = "-image"


def metadata_filename(selfie_id: UUID) -> str:
    return f"{selfie_id}{METADATA_SUFFIX}"


def image_filename(selfie_id: UUID, suffix: str = ".jpg") -> str:
    if suffix == METADATA_SUFFIX:
        raise ValueError("image suffix must differ from the metadata suffix")
    return f"{selfie_id}{IMAGE_MARKER}{suffix}"


def is_metadata_file(path: Path) -> bool:
    return path.is_file() and path.name.endswith(METADATA_SUFFIX)


def remove_file(path: Path) -> bool:
    """Unlink ``path``; return ``False`` when there was nothing to remove."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        raise DeletionError(path, str(exc)) from exc
    return True
