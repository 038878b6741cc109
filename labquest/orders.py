"""Delivery orders: CSV loading, the shared order store and the delivery log."""

from __future__ import annotations

import json
import os
import sys
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from filelock import FileLock

MAX_ORDERS = 100
PENDING = "Pending"
EXPRESS = "Express"
REGULAR = "Reguler"
STATUS_LEN = 63

DEFAULT_CSV_PATH = Path("delivery_order.csv")
DEFAULT_STORE_PATH = Path("delivery_orders.json")
DEFAULT_LOG_PATH = Path("delivery.log")

_NAME_LEN = 63
_ADDRESS_LEN = 127
_KIND_LEN = 15


@dataclass
class Order:
    """One delivery order."""

    name: str
    address: str
    kind: str
    status: str = PENDING


def _parse_line(line):
    """Split ``name,address,kind`` the way the CSV loader expects; None if incomplete."""
    line = line.rstrip("\r\n")
    name, sep, rest = line.lstrip(",").partition(",")
    if not name or not sep:
        return None
    address, sep, kind = rest.lstrip(",").partition(",")
    if not address or not sep or not kind:
        return None
    return Order(name[:_NAME_LEN], address[:_ADDRESS_LEN], kind[:_KIND_LEN])


def load_orders_csv(path):
    """Read at most MAX_ORDERS orders from a CSV file whose first line is a header."""
    orders = []
    with open(path, encoding="utf-8") as f:
        next(f, None)
        for line in f:
            if len(orders) >= MAX_ORDERS:
                break
            order = _parse_line(line)
            if order is not None:
                orders.append(order)
    return orders


def append_delivery_log(log_path, agent, order, kind, when=None):
    """Append a delivery line for ``order`` to the log file."""
    when = when or datetime.now()
    line = (
        f"[{when:%d/%m/%Y %H:%M:%S}] [AGENT {agent}] {kind} package delivered to "
        f"{order.name} in {order.address}\n"
    )
    try:
        with open(log_path, "a", encoding="utf-8") as log:
            log.write(line)
    except OSError as exc:
        print(f"Gagal membuka {log_path}: {exc}", file=sys.stderr)


class OrderStore:
    """Orders shared between processes in a locked JSON file.

    An empty or missing store is seeded from the CSV file on first use;
    ``seeded`` tells whether that happened through this object.
    """

    def __init__(self, path=DEFAULT_STORE_PATH, csv_path=DEFAULT_CSV_PATH):
        self.path = Path(path)
        self.csv_path = Path(csv_path)
        self.seeded = False
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(self.path) + ".lock")

    def _load(self):
        orders = []
        if self.path.exists():
            text = self.path.read_text(encoding="utf-8")
            if text.strip():
                orders = [Order(**item) for item in json.loads(text)]
        if not orders:
            orders = load_orders_csv(self.csv_path)
            self._save(orders)
            self.seeded = True
        return orders

    def _save(self, orders):
        directory = self.path.parent
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump([asdict(order) for order in orders], f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def read(self):
        """Return a snapshot of all orders."""
        with self._thread_lock, self._file_lock:
            return self._load()

    @contextmanager
    def transaction(self):
        """Yield the orders for editing; they are saved unless the block raises."""
        with self._thread_lock, self._file_lock:
            orders = self._load()
            yield orders
            self._save(orders)