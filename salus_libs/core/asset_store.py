"""
Asset Store.

Read-only access to the named documents the generation endpoints need:
JSON Schemas (`schemas/<name>.json`) and base prompt templates
(`prompts/<name>.txt`). Documents are cached after the first read.
"""

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, Union

logger = logging.getLogger(__name__)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_\-]*$")


class AssetError(Exception):
    """Base class for asset loading failures."""

    def __init__(self, kind: str, name: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.name = name


class AssetNotFound(AssetError):
    """No backing document exists for the requested name."""


class AssetReadError(AssetError):
    """The backing document exists but could not be read."""


@dataclass(frozen=True)
class SchemaDocument:
    """An immutable JSON Schema text identified by a logical name."""

    name: str
    text: str


class AssetStore:
    """Loads schemas and prompt templates from a base directory."""

    SCHEMA_DIR = "schemas"
    PROMPT_DIR = "prompts"

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)
        self._cache: Dict[Tuple[str, str], str] = {}
        self._lock = threading.Lock()

    def load_schema(self, name: str) -> SchemaDocument:
        return SchemaDocument(name=name, text=self._read("schema", name))

    def load_prompt(self, name: str) -> str:
        return self._read("prompt", name)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _path_for(self, kind: str, name: str) -> Path:
        if kind == "schema":
            return self.base_dir / self.SCHEMA_DIR / f"{name}.json"
        return self.base_dir / self.PROMPT_DIR / f"{name}.txt"

    def _read(self, kind: str, name: str) -> str:
        key = (kind, name)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if not name or not _SAFE_NAME.match(name):
            raise AssetNotFound(kind, name, f"Invalid {kind} name: {name!r}")

        with self._lock:
            # 双重检查：等锁期间可能已被其他线程填充
            cached = self._cache.get(key)
            if cached is not None:
                return cached

            path = self._path_for(kind, name)
            if not path.is_file():
                raise AssetNotFound(kind, name, f"No {kind} document named '{name}' ({path})")
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error("Failed to read %s %s: %s", kind, path, e)
                raise AssetReadError(kind, name, f"Error loading {kind} '{name}': {e}") from e

            self._cache[key] = text
            logger.debug("Loaded %s '%s' from %s", kind, name, path)
            return text
