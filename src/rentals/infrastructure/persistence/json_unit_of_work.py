"""JSON-file-backed unit of work.

All collections live in one document (``store.json``) so a commit is a
single atomic file replacement.  While a unit of work is open it holds
both an in-process lock (threads) and an exclusive ``flock`` on
``store.lock`` (other processes), which makes every unit of work run
serially against the store.
"""

from __future__ import annotations

import fcntl
import json
import os
import tempfile
import threading
from pathlib import Path

from rentals.domain.repository.unit_of_work import UnitOfWork
from rentals.infrastructure.persistence.json_invoice_repository import (
    JsonInvoiceRepository,
)
from rentals.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from rentals.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

_COLLECTIONS = ("products", "orders", "invoices")

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _thread_lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir.resolve()
        self._file_path = self._data_dir / "store.json"
        self._lock_path = self._data_dir / "store.lock"
        self._thread_lock = _thread_lock_for(self._data_dir)
        self._lock_file = None
        self._document: dict[str, list[dict]] = {}

    # --- UnitOfWork hooks -----------------------------------------------------

    def _begin(self) -> None:
        self._thread_lock.acquire()
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._lock_file = open(self._lock_path, "a+", encoding="utf-8")
            fcntl.flock(self._lock_file, fcntl.LOCK_EX)
            self._load()
        except BaseException:
            self._end()
            raise

    def _commit(self) -> None:
        self._persist(self._document)

    def rollback(self) -> None:
        self._load()

    def _end(self) -> None:
        try:
            if self._lock_file is not None:
                fcntl.flock(self._lock_file, fcntl.LOCK_UN)
                self._lock_file.close()
                self._lock_file = None
        finally:
            self._thread_lock.release()

    # --- File helpers ---------------------------------------------------------

    def _load(self) -> None:
        if self._file_path.exists():
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        else:
            raw = {}
        self._document = {name: list(raw.get(name, [])) for name in _COLLECTIONS}
        self.products = JsonProductRepository(self._document["products"])
        self.orders = JsonOrderRepository(self._document["orders"])
        self.invoices = JsonInvoiceRepository(self._document["invoices"])

    def _persist(self, document: dict[str, list[dict]]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self._data_dir, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(json.dumps(document, indent=2) + "\n")
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._file_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
