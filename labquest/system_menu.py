"""System menu: owns the shared world, generates dungeons and manages hunters."""

from __future__ import annotations

import argparse
import random
import sys

from .hunters import DEFAULT_STORE_PATH, WorldStore

MENU = (
    "\n=== SYSTEM MENU ===\n"
    "1. Hunter Info\n"
    "2. Dungeon Info\n"
    "3. Generate Dungeon\n"
    "4. Ban Hunter\n"
    "5. Unban Hunter\n"
    "6. Reset Hunter\n"
    "7. Exit\n"
    "Choice: "
)
NOT_FOUND = "[System Menu] Hunter tidak ditemukan\n"


def format_hunters(world):
    """Return the hunter table."""
    lines = ["\n=== HUNTER INFO ===\n"]
    lines.extend(
        f"Name: {h.username:<15} Level: {h.level}    EXP: {h.exp}    "
        f"ATK: {h.atk}    HP: {h.hp}    DEF: {h.defense}\n"
        for h in world.hunters
        if h is not None
    )
    return "".join(lines)


def format_dungeons(world):
    """Return the details of every open dungeon."""
    lines = ["\n=== DUNGEON INFO ===\n"]
    lines.extend(
        f"[Dungeon {number}]\nName: {d.name}\nMinimum Level: {d.min_level}\n"
        f"EXP Reward: {d.reward_exp}\nATK: {d.reward_atk}\nHP: {d.reward_hp}\n"
        f"Def: {d.reward_def}\nKey: {d.key}\n\n"
        for number, d in enumerate(world.dungeons, start=1)
        if d is not None
    )
    return "".join(lines)


def _say(out, text):
    out.write(text)
    out.flush()


def _ask_word(inp, out, prompt):
    _say(out, prompt)
    while True:
        line = inp.readline()
        if not line:
            raise EOFError
        words = line.split()
        if words:
            return words[0]


def _ask_int(inp, out, prompt):
    try:
        return int(_ask_word(inp, out, prompt))
    except ValueError:
        return None


def _generate(store, out, rng):
    with store.transaction() as world:
        try:
            dungeon = world.generate_dungeon(rng)
        except OverflowError:
            dungeon = None
    if dungeon is None:
        _say(out, "\nDungeon list full.\n")
    else:
        _say(out, f"\nDungeon generated!\nName: {dungeon.name}\nMinimum level: {dungeon.min_level}\n")


def _ban(store, inp, out, banned):
    prefix = "" if banned else "un"
    name = _ask_word(inp, out, f"Masukkan nama Hunter yang ingin di{prefix}ban: ")
    try:
        with store.transaction() as world:
            world.set_banned(name, banned)
    except KeyError:
        _say(out, NOT_FOUND)
        return
    _say(out, f"[System Menu] Hunter {name} berhasil di{prefix}ban\n")


def _reset(store, inp, out):
    name = _ask_word(inp, out, "Masukkan nama Hunter yang ingin direset: ")
    try:
        with store.transaction() as world:
            world.reset_hunter(name)
    except KeyError:
        _say(out, NOT_FOUND)
        return
    _say(out, f"[System Menu] Hunter {name} berhasil direset\n")


def _shut_down(store, out):
    with store.transaction() as world:
        world.shutdown = True
    store.remove()
    _say(out, "\n[System Menu] Shared memory cleaned up.\n")


def run_system(store, input_stream=None, output_stream=None, rng=None):
    """Start a fresh world and run the system menu; the world is removed on exit."""
    inp = sys.stdin if input_stream is None else input_stream
    out = sys.stdout if output_stream is None else output_stream
    rng = random.Random() if rng is None else rng

    store.remove()
    with store.transaction():
        pass

    try:
        while True:
            choice = _ask_int(inp, out, MENU)
            if choice == 1:
                _say(out, format_hunters(store.read()))
            elif choice == 2:
                _say(out, format_dungeons(store.read()))
            elif choice == 3:
                _generate(store, out, rng)
            elif choice == 4:
                _ban(store, inp, out, True)
            elif choice == 5:
                _ban(store, inp, out, False)
            elif choice == 6:
                _reset(store, inp, out)
            elif choice == 7:
                break
            else:
                _say(out, "[System Menu] Pilihan tidak valid\n")
    except (EOFError, KeyboardInterrupt):
        pass
    finally:
        _shut_down(store, out)
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="System menu.")
    parser.add_argument("--store", default=DEFAULT_STORE_PATH)
    args = parser.parse_args(argv)
    return run_system(WorldStore(args.store))


if __name__ == "__main__":
    sys.exit(main())