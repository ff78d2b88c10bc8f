"""
Persistance optionnelle de l'état client (équivalent du localStorage).
Un fichier JSON par clé dans un dossier; écriture atomique (fichier temporaire + os.replace).
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from .config import STOREFRONT_STATE_DIR

logger = logging.getLogger(__name__)


class JsonStateStorage:
    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str, default: Any = None) -> Any:
        """Valeur enregistrée sous key; un fichier absent ou illisible rend default (journalisé)."""
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning("storage.load %s illisible: %s", path, e)
            return default

    def save(self, key: str, value: Any) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(self.directory), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(value, fh, ensure_ascii=False)
            os.replace(tmp, self._path(key))
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


def default_storage() -> Optional[JsonStateStorage]:
    """Stockage configuré par STOREFRONT_STATE_DIR, sinon None (état de session uniquement)."""
    return JsonStateStorage(STOREFRONT_STATE_DIR) if STOREFRONT_STATE_DIR else None
