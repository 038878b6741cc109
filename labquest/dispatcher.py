"""Dispatcher command: deliver Reguler orders, check status and list orders."""

from __future__ import annotations

import os
import sys

from .orders import (
    DEFAULT_CSV_PATH,
    DEFAULT_LOG_PATH,
    DEFAULT_STORE_PATH,
    PENDING,
    REGULAR,
    STATUS_LEN,
    OrderStore,
    append_delivery_log,
)

USAGE = (
    "Penggunaan:\n"
    "./dispatcher -deliver [Nama]\n"
    "./dispatcher -status [Nama]\n"
    "./dispatcher -list"
)


def deliver(orders, name, agent):
    """Mark the pending Reguler order of ``name`` as delivered; return it or None."""
    for order in orders:
        if order.name == name and order.kind == REGULAR and order.status == PENDING:
            order.status = f"Delivered by Agent {agent}"[:STATUS_LEN]
            return order
    return None


def status(orders, name):
    """Return the status of the first order for ``name``, or None."""
    return next((order.status for order in orders if order.name == name), None)


def list_orders(orders):
    """Return the order listing as text."""
    lines = ["Daftar Semua Pesanan:"]
    lines.extend(
        f"{o.name} | {o.address} | {o.kind} | {o.status}" for o in orders
    )
    return "\n".join(lines) + "\n"


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    store = OrderStore(DEFAULT_STORE_PATH, DEFAULT_CSV_PATH)
    try:
        store.read()
    except OSError as exc:
        print(f"Gagal membuka {DEFAULT_CSV_PATH}: {exc}", file=sys.stderr)
        return 1
    if store.seeded:
        print("Shared memory kosong. Memuat dari CSV...")

    if not args:
        print(USAGE)
        return 0

    command = args[0]
    if command == "-deliver" and len(args) == 2:
        target = args[1]
        agent = os.environ.get("USER", "UNKNOWN")
        with store.transaction() as orders:
            order = deliver(orders, target, agent)
            if order is not None:
                append_delivery_log(DEFAULT_LOG_PATH, agent, order, REGULAR)
        if order is not None:
            print(f"Status for {target}: Delivered by Agent {agent}")
        else:
            print(f"Status for {target}: Pending")
    elif command == "-status" and len(args) == 2:
        target = args[1]
        found = status(store.read(), target)
        if found is None:
            print(f"Order untuk {target} tidak ditemukan.")
        else:
            print(f"Status for {target}: {found}")
    elif command == "-list":
        print(list_orders(store.read()), end="")
    else:
        print("Perintah tidak dikenali.")
    return 0


if __name__ == "__main__":
    sys.exit(main())