"""
Result store - durable query -> raw payload mapping

The whole document is rewritten on every mutation. Writes go to a temporary
file in the same folder which then replaces the document, so readers never
see a payload without its lastQuery pointer or vice versa.
"""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from .errors import StorageError
from .models import RawSearchPayload, StoredSearches

DEFAULT_FILE_MODE = 0o644


class ResultStore:
    """File-backed cache of raw search results"""

    def __init__(self, folder: str | Path, filename: str = "searches.json") -> None:
        self.folder: Path = Path(folder)
        self.path: Path = self.folder / filename
        self._document: StoredSearches = StoredSearches()

    def load(self) -> "ResultStore":
        """Read the stored document, resetting it to empty if missing or unreadable"""
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to initialize storage folder {self.folder}: {e}")
            raise StorageError(f"Failed to initialize storage: {e}") from e

        try:
            self._document = StoredSearches.model_validate(json.loads(self.path.read_text(encoding="utf-8")))
            logger.info(f"Loaded {len(self._document.searches)} stored searches from {self.path}")
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning(f"Resetting search store {self.path}: {e}")
            self._document = StoredSearches()
            self._persist()

        return self

    def get(self, query: str) -> Optional[RawSearchPayload]:
        return self._document.searches.get(query)

    def put(self, query: str, payload: RawSearchPayload) -> None:
        """Store payload under query and make it the last result; raises StorageError if not persisted"""
        searches = self._document.searches
        had_previous: bool = query in searches
        previous_payload: Optional[RawSearchPayload] = searches.get(query)
        previous_last_query: Optional[str] = self._document.last_query

        searches[query] = payload
        self._document.last_query = query

        try:
            self._persist()
        except StorageError:
            if had_previous:
                searches[query] = previous_payload
            else:
                del searches[query]
            self._document.last_query = previous_last_query
            raise

    def last_result(self) -> Optional[RawSearchPayload]:
        if self._document.last_query is None:
            return None
        return self._document.searches.get(self._document.last_query)

    @property
    def last_query(self) -> Optional[str]:
        return self._document.last_query

    def queries(self) -> list[str]:
        return list(self._document.searches)

    def __contains__(self, query: object) -> bool:
        return query in self._document.searches

    def __len__(self) -> int:
        return len(self._document.searches)

    def _persist(self) -> None:
        text: str = json.dumps(self._document.model_dump(by_alias=True), ensure_ascii=False, indent=2)
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.folder, prefix=f".{self.path.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates the file 0600
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to save searches to {self.path}: {e}")
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Failed to save searches: {e}") from e
        logger.debug(f"Persisted {len(self._document.searches)} searches to {self.path}")

    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE
