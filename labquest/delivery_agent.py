"""Express delivery agents working through the shared order store."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from dataclasses import replace

from .orders import (
    DEFAULT_CSV_PATH,
    DEFAULT_LOG_PATH,
    DEFAULT_STORE_PATH,
    EXPRESS,
    PENDING,
    STATUS_LEN,
    OrderStore,
    append_delivery_log,
)


def _is_pending_express(order):
    return order.kind == EXPRESS and order.status == PENDING


def express_orders_done(orders):
    """True when no Express order is still pending."""
    return not any(_is_pending_express(order) for order in orders)


def deliver_next_express(orders, agent):
    """Mark the first pending Express order as delivered by ``agent`` and return it."""
    order = next((o for o in orders if _is_pending_express(o)), None)
    if order is not None:
        order.status = f"Delivered by {agent}"[:STATUS_LEN]
    return order


def run_agents(store, log_path=DEFAULT_LOG_PATH, agents=("A", "B", "C"), delay=1.0):
    """Run one thread per agent until every Express order is delivered.

    Returns the deliveries as ``(agent, order)`` pairs in the order they happened.
    """
    deliveries = []
    record_lock = threading.Lock()

    def work(agent):
        while True:
            with store.transaction() as orders:
                order = deliver_next_express(orders, agent)
                if order is not None:
                    append_delivery_log(log_path, agent, order, EXPRESS)
                    print(
                        f"[AGENT {agent}] Delivered Express package to "
                        f"{order.name} in {order.address}",
                        flush=True,
                    )
                    with record_lock:
                        deliveries.append((agent, replace(order)))
                finished = order is None and express_orders_done(orders)
            if finished:
                break
            time.sleep(delay)

    threads = [threading.Thread(target=work, args=(agent,)) for agent in agents]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return deliveries


def main(argv=None):
    parser = argparse.ArgumentParser(description="Deliver all Express orders.")
    parser.add_argument("--store", default=DEFAULT_STORE_PATH)
    parser.add_argument("--csv", default=DEFAULT_CSV_PATH)
    parser.add_argument("--log", default=DEFAULT_LOG_PATH)
    parser.add_argument("--delay", type=float, default=1.0)
    args = parser.parse_args(argv)

    store = OrderStore(args.store, args.csv)
    try:
        store.read()
    except OSError as exc:
        print(f"Gagal membuka {args.csv}: {exc}", file=sys.stderr)
        return 1
    if store.seeded:
        print("Shared memory kosong. Memuat data dari CSV...")

    run_agents(store, args.log, delay=args.delay)
    print("Semua paket Express telah dikirim. Program selesai.")
    return 0


if __name__ == "__main__":
    sys.exit(main())