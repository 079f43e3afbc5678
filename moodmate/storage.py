"""In-memory data stores backing the application state.

Users and journal entries live in :class:`PersistentCollection` instances
that mirror every mutation to a JSON file. Sessions live only in memory.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import re
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from moodmate.utils.auth import generate_token, now_iso, now_millis

_LOGGER = logging.getLogger(__name__)

Record = Dict[str, Any]

ID_PATTERN = re.compile(r"id_\d+_(\d+)")

USERS_FILENAME = "users.json"
JOURNALS_FILENAME = "journals.json"


class StorageError(Exception):
    """Raised when a backing file cannot be read, parsed or written."""


class RecordNotFoundError(LookupError):
    """Raised when no record carries the requested identifier."""


class IdGenerator:
    """Issue ``id_<millis>_<ordinal>`` identifiers with a strictly rising ordinal."""

    def __init__(self) -> None:
        self._counter = 1
        self._lock = threading.Lock()

    @property
    def next_ordinal(self) -> int:
        return self._counter

    def seed(self, identifiers: Iterable[str]) -> int:
        """Move the ordinal past every ordinal already in use.

        Identifiers without an ordinal suffix count as zero.
        """
        highest = 0
        for identifier in identifiers:
            match = ID_PATTERN.search(str(identifier))
            if match is None:
                _LOGGER.warning("Identifier %r has no ordinal suffix; treating it as 0", identifier)
                continue
            highest = max(highest, int(match.group(1)))

        with self._lock:
            self._counter = max(self._counter, highest + 1)
            return self._counter

    def next(self) -> str:
        with self._lock:
            ordinal = self._counter
            self._counter += 1
        return f"id_{now_millis()}_{ordinal}"


class PersistentCollection:
    """An ordered record list mirrored to a single JSON array file.

    Mutations are staged on a copy, written to a temporary file and renamed
    over the backing file. The in-memory list is swapped in only once the
    write has succeeded, so memory and disk never disagree.

    ``lock`` is re-entrant; hold it to make a read-then-write sequence atomic.
    """

    def __init__(
        self,
        path: Path,
        name: str,
        clock: Callable[[], str] = now_iso,
    ) -> None:
        self.path = Path(path)
        self.name = name
        self.lock = threading.RLock()
        self._clock = clock
        self._records: List[Record] = []

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> int:
        """Read the backing file, creating an empty one on first run."""
        with self.lock:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
                _LOGGER.info("Created data directory %s", self.path.parent)

            if not self.path.exists():
                _LOGGER.info("%s file not found, starting empty at %s", self.name, self.path)
                self._write([])
                self._records = []
                return 0

            try:
                with self.path.open("r", encoding="utf-8") as handle:
                    data = json.load(handle)
            except (OSError, ValueError) as exc:
                raise StorageError(f"Cannot load {self.name} from {self.path}: {exc}") from exc

            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                raise StorageError(f"{self.path} must contain a JSON array of objects")

            self._records = data
            return len(data)

    def all(self) -> List[Record]:
        """Return copies of every record in insertion order."""
        with self.lock:
            return copy.deepcopy(self._records)

    def ids(self) -> List[str]:
        with self.lock:
            return [record.get("id") for record in self._records]

    def find(self, predicate: Callable[[Record], bool]) -> Optional[Record]:
        with self.lock:
            for record in self._records:
                if predicate(record):
                    return copy.deepcopy(record)
        return None

    def get(self, record_id: str) -> Optional[Record]:
        return self.find(lambda record: record.get("id") == record_id)

    def insert(self, record: Record) -> Record:
        with self.lock:
            staged = self._records + [copy.deepcopy(record)]
            self._commit(staged)
            return copy.deepcopy(record)

    def update(self, record_id: str, patch: Dict[str, Any]) -> Record:
        """Replace the patched fields of a record and stamp ``updatedAt``."""
        with self.lock:
            index = self._index_of(record_id)
            updated = copy.deepcopy(self._records[index])
            updated.update(copy.deepcopy(patch))
            updated["updatedAt"] = self._clock()

            staged = list(self._records)
            staged[index] = updated
            self._commit(staged)
            return copy.deepcopy(updated)

    def remove(self, record_id: str) -> Record:
        with self.lock:
            index = self._index_of(record_id)
            staged = list(self._records)
            removed = staged.pop(index)
            self._commit(staged)
            return copy.deepcopy(removed)

    def clear(self) -> int:
        with self.lock:
            removed = len(self._records)
            self._commit([])
            return removed

    def flush(self) -> None:
        """Rewrite the backing file from the current in-memory state."""
        with self.lock:
            self._write(self._records)

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record.get("id") == record_id:
                return index
        raise RecordNotFoundError(record_id)

    def _commit(self, staged: List[Record]) -> None:
        self._write(staged)
        self._records = staged

    def _write(self, records: List[Record]) -> None:
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(records, handle, indent=2, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            _LOGGER.exception("Error saving %s to %s", self.name, self.path)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Cannot save {self.name}: {exc}") from exc


class SessionStore:
    """Volatile mapping of session tokens to session contexts."""

    def __init__(self, clock: Callable[[], str] = now_iso) -> None:
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def create(self, user_id: str, email: str) -> str:
        token = generate_token("session")
        context = {
            "userId": user_id,
            "email": email,
            "createdAt": self._clock(),
        }
        with self._lock:
            self._sessions[token] = context
        return token

    def lookup(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        with self._lock:
            context = self._sessions.get(token)
            return dict(context) if context is not None else None

    def destroy(self, token: Optional[str]) -> bool:
        """Drop a session. Unknown tokens are ignored."""
        if not token:
            return False
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)


class Stores:
    """Bundle of the stores one application instance works against."""

    def __init__(self, data_dir: Path, clock: Callable[[], str] = now_iso) -> None:
        self.data_dir = Path(data_dir)
        self.clock = clock
        self.users = PersistentCollection(self.data_dir / USERS_FILENAME, "users", clock)
        self.journals = PersistentCollection(self.data_dir / JOURNALS_FILENAME, "journals", clock)
        self.sessions = SessionStore(clock)
        self.ids = IdGenerator()

    def load(self) -> "Stores":
        user_count = self.users.load()
        journal_count = self.journals.load()
        next_ordinal = self.ids.seed(self.users.ids() + self.journals.ids())
        _LOGGER.info(
            "Loaded %d users and %d journal entries from %s (next id ordinal %d)",
            user_count,
            journal_count,
            self.data_dir,
            next_ordinal,
        )
        return self

    def flush(self) -> None:
        self.users.flush()
        self.journals.flush()
