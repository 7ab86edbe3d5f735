from __future__ import annotations

import logging
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError

from ..errors import EnumerationError, PersistenceError
from ..schemas import Selfie, normalize_selfie_id, validate_json
from .layout import is_metadata_file, metadata_filename, remove_file

logger = logging.getLogger(__name__)


class RecordCatalog:
    """Selfie metadata stored as one ``<id>.json`` file per record."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, selfie_id: Selfie | UUID | str) -> Path:
        return self.directory / metadata_filename(normalize_selfie_id(selfie_id))

    def save(self, selfie: Selfie) -> Selfie:
        path = self.path_for(selfie.id)
        try:
            payload = selfie.model_dump_json()
        except ValueError as exc:
            raise PersistenceError(f"Cannot serialize selfie id={selfie.id}: {exc}") from exc

        try:
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc

        logger.info("record_catalog save id=%s", selfie.id)
        return selfie

    def load(self, selfie_id: Selfie | UUID | str) -> Selfie | None:
        path = self.path_for(selfie_id)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.info("record_catalog miss id=%s reason=not_found", path.stem)
            return None
        except OSError as exc:
            logger.warning("record_catalog miss id=%s reason=unreadable error=%s", path.stem, exc)
            return None

        return self._decode(path, raw)

    def exists(self, selfie_id: Selfie | UUID | str) -> bool:
        return self.path_for(selfie_id).is_file()

    def list(self) -> list[Selfie]:
        try:
            paths = sorted(path for path in self.directory.iterdir() if is_metadata_file(path))
        except OSError as exc:
            raise EnumerationError(f"Cannot list {self.directory}: {exc}") from exc

        selfies: list[Selfie] = []
        for path in paths:
            try:
                raw = path.read_bytes()
            except OSError as exc:
                logger.warning("record_catalog skip unreadable path=%s error=%s", path, exc)
                continue
            selfie = self._decode(path, raw)
            if selfie is not None:
                selfies.append(selfie)

        selfies.sort(key=lambda selfie: (selfie.created, str(selfie.id)))
        return selfies

    def delete(self, selfie_id: Selfie | UUID | str) -> bool:
        path = self.path_for(selfie_id)
        removed = remove_file(path)
        logger.info("record_catalog delete id=%s removed=%s", path.stem, removed)
        return removed

    def _decode(self, path: Path, raw: bytes) -> Selfie | None:
        try:
            selfie = validate_json(Selfie, raw)
        except ValidationError as exc:
            logger.warning(
                "record_catalog skip undecodable path=%s errors=%s",
                path,
                exc.error_count(),
            )
            return None

        if metadata_filename(selfie.id) != path.name:
            logger.warning("record_catalog skip mismatched path=%s id=%s", path, selfie.id)
            return None
        return selfie
