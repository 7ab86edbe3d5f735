from __future__ import annotations

import logging
import threading
from pathlib import Path
from uuid import UUID

from PIL import Image

from ..codec import JpegCodec
from ..errors import DecodingError, PersistenceError
from ..schemas import Selfie, normalize_selfie_id
from .layout import image_filename, remove_file

logger = logging.getLogger(__name__)


class BlobCache:
    """Selfie images on disk with a write-through in-memory cache.

    Images live next to the metadata as ``<id>-image.jpg``. A missing or
    unreadable file reads as "no image". The cache holds a private copy of the
    image most recently written (or read) for an id, so later changes to the
    caller's image do not reach it. Images returned by ``get`` are shared with
    the cache and should be treated as read-only.
    """

    def __init__(self, directory: str | Path, codec: JpegCodec | None = None) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.codec = codec or JpegCodec()
        self._images: dict[UUID, Image.Image] = {}
        self._lock = threading.RLock()

    def path_for(self, selfie_id: Selfie | UUID | str) -> Path:
        return self.directory / image_filename(normalize_selfie_id(selfie_id), self.codec.suffix)

    def get(self, selfie_id: Selfie | UUID | str) -> Image.Image | None:
        key = normalize_selfie_id(selfie_id)
        with self._lock:
            cached = self._images.get(key)
            if cached is not None:
                logger.debug("blob_cache hit id=%s", key)
                return cached

            path = self.path_for(key)
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                logger.debug("blob_cache miss id=%s reason=not_found", key)
                return None
            except OSError as exc:
                logger.warning("blob_cache miss id=%s reason=unreadable error=%s", key, exc)
                return None

            try:
                image = self.codec.decode(data)
            except DecodingError as exc:
                logger.warning("blob_cache miss id=%s reason=undecodable error=%s", key, exc)
                return None

            self._images[key] = image
            logger.debug("blob_cache load id=%s bytes=%s", key, len(data))
            return image

    def set(self, selfie_id: Selfie | UUID | str, image: Image.Image | None) -> None:
        """Write ``image`` for the id, or remove the stored image when ``None``.

        Removing an image that was never stored is a no-op.
        """
        key = normalize_selfie_id(selfie_id)
        if image is None:
            self.delete(key)
            return

        # Encoding happens before any disk access so a bad payload leaves the file alone.
        data = self.codec.encode(image)
        path = self.path_for(key)
        with self._lock:
            try:
                path.write_bytes(data)
            except OSError as exc:
                self._images.pop(key, None)
                raise PersistenceError(f"Cannot write {path}: {exc}") from exc
            self._images[key] = image.copy()
        logger.info("blob_cache set id=%s bytes=%s", key, len(data))

    def delete(self, selfie_id: Selfie | UUID | str) -> bool:
        key = normalize_selfie_id(selfie_id)
        with self._lock:
            try:
                removed = remove_file(self.path_for(key))
            finally:
                self._images.pop(key, None)
        logger.info("blob_cache delete id=%s removed=%s", key, removed)
        return removed

    def evict(self, selfie_id: Selfie | UUID | str) -> None:
        with self._lock:
            self._images.pop(normalize_selfie_id(selfie_id), None)

    def is_cached(self, selfie_id: Selfie | UUID | str) -> bool:
        with self._lock:
            return normalize_selfie_id(selfie_id) in self._images

    def clear(self) -> None:
        with self._lock:
            self._images.clear()
