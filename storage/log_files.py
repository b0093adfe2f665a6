from __future__ import annotations
import io
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Dict, Iterable, Iterator, Optional, Set, TextIO

from services.errors import StreamOpenError
from settings import get_settings


class LogFileStore:
    """Holds wheel log files in memory and, optionally, under a directory."""

    def __init__(self, name: str, root_path: Optional[Path] = None) -> None:
        self.name = name
        self._objects: Dict[str, bytes] = {}
        self._known_keys: Set[str] = set()
        self.root_path = root_path
        self._lock = Lock()
        if root_path:
            root_path.mkdir(parents=True, exist_ok=True)
            self._load_existing_keys()

    def put_object(self, key: str, data: bytes) -> None:
        path = self._resolve(key) if self.root_path else None
        with self._lock:
            self._objects[key] = data
            self._known_keys.add(key)
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(data)

    def exists(self, key: str) -> bool:
        with self._lock:
            if key in self._objects:
                return True
        if not self.root_path:
            return False
        try:
            return self._resolve(key).is_file()
        except (StreamOpenError, OSError, ValueError):
            return False

    @contextmanager
    def open_stream(self, key: str, encoding: str = "utf-8") -> Iterator[TextIO]:
        """Yield a text stream over the stored log, closing it on exit.

        Raises ``StreamOpenError`` when the key is unknown or unreadable.
        """

        with self._lock:
            data = self._objects.get(key)

        if data is not None:
            handle: TextIO = io.StringIO(data.decode(encoding, errors="replace"))
        elif self.root_path:
            path = self._resolve(key)
            try:
                handle = path.open("r", encoding=encoding, errors="replace", newline="")
            except FileNotFoundError as exc:
                raise StreamOpenError(
                    f"Log {key!r} not found in store {self.name!r}."
                ) from exc
            except OSError as exc:
                raise StreamOpenError(f"Cannot open log {key!r}: {exc.strerror or exc}") from exc
        else:
            raise StreamOpenError(f"Log {key!r} not found in store {self.name!r}.")

        try:
            yield handle
        finally:
            handle.close()

    def list_objects(self) -> Iterable[str]:
        with self._lock:
            keys = set(self._known_keys)

        if self.root_path:
            for path in self.root_path.rglob("*"):
                if path.is_file():
                    keys.add(path.relative_to(self.root_path).as_posix())

        with self._lock:
            keys.update(self._objects.keys())

        return sorted(keys)

    def _resolve(self, key: str) -> Path:
        assert self.root_path is not None
        try:
            root = self.root_path.resolve()
            path = (root / key).resolve()
        except (ValueError, RuntimeError, OSError) as exc:
            raise StreamOpenError(f"Invalid log name {key!r}: {exc}") from exc
        if path != root and root not in path.parents:
            raise StreamOpenError(f"Log {key!r} is outside store {self.name!r}.")
        return path

    def _load_existing_keys(self) -> None:
        assert self.root_path is not None
        for path in self.root_path.rglob("*"):
            if path.is_file():
                key = path.relative_to(self.root_path).as_posix()
                self._known_keys.add(key)


@lru_cache
def build_default_store(
    name: Optional[str] = None,
    root_path: Optional[str] = None,
) -> LogFileStore:
    settings = get_settings()
    store_name = settings.logs_store_name if name is None else name
    store_root = settings.logs_root_path if root_path is None else root_path
    path = Path(store_root) if store_root else None
    return LogFileStore(name=store_name, root_path=path)
