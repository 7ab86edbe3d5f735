from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING
from uuid import UUID

from PIL import Image

from ..codec import JpegCodec
from ..schemas import Selfie, normalize_selfie_id
from .blobs import BlobCache
from .catalog import RecordCatalog

if TYPE_CHECKING:
    from ..config import StoreConfig

logger = logging.getLogger(__name__)


class SelfieStore:
    """Selfie records and their images under one storage directory.

    Records and images have separate write paths: ``save`` only writes the
    record, ``set_image`` only writes the image. ``delete`` removes both.
    """

    def __init__(self, root: str | Path, codec: JpegCodec | None = None) -> None:
        self.root = Path(root)
        self.catalog = RecordCatalog(self.root)
        self.images = BlobCache(self.root, codec=codec)

    @classmethod
    def from_config(cls, config: StoreConfig) -> SelfieStore:
        return cls(config.directory, codec=JpegCodec(quality=config.image_quality))

    def create(self, title: str | None = None) -> Selfie:
        selfie = Selfie() if title is None else Selfie(title=title)
        return self.save(selfie)

    def save(self, selfie: Selfie) -> Selfie:
        return self.catalog.save(selfie)

    def load(self, selfie_id: Selfie | UUID | str) -> Selfie | None:
        return self.catalog.load(selfie_id)

    def list(self) -> list[Selfie]:
        return self.catalog.list()

    def get_image(self, selfie_id: Selfie | UUID | str) -> Image.Image | None:
        return self.images.get(selfie_id)

    def set_image(self, selfie_id: Selfie | UUID | str, image: Image.Image | None) -> None:
        self.images.set(selfie_id, image)

    def delete(self, selfie_or_id: Selfie | UUID | str) -> None:
        """Delete the record, then its image; the cached image is always dropped.

        A missing record or image is not an error.
        """
        selfie_id = normalize_selfie_id(selfie_or_id)
        try:
            self.catalog.delete(selfie_id)
            self.images.delete(selfie_id)
        finally:
            self.images.evict(selfie_id)
        logger.info("selfie_store delete id=%s", selfie_id)
