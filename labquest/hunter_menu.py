"""Interactive hunter menu: register, log in, raid dungeons and battle other hunters."""

from __future__ import annotations

import argparse
import sys
import time

from .hunters import DEFAULT_STORE_PATH, WorldStore

NOTIFY_INTERVAL = 3.0
CLEAR_SCREEN = "\033[2J\033[H"

MAIN_MENU = "\n=== HUNTER MENU ===\n1. Register\n2. Login\n3. Exit\nChoice: "


class _SessionOver(Exception):
    """The program ends: the system shut down or the hunter was deleted."""


class _Console:
    def __init__(self, input_stream, output_stream):
        self._in = input_stream
        self._out = output_stream

    def say(self, text):
        self._out.write(text)
        self._out.flush()

    def line(self, prompt=""):
        self.say(prompt)
        text = self._in.readline()
        if not text:
            raise EOFError
        return text.rstrip("\n")

    def word(self, prompt=""):
        self.say(prompt)
        while True:
            text = self._in.readline()
            if not text:
                raise EOFError
            words = text.split()
            if words:
                return words[0]

    def number(self, prompt=""):
        try:
            return int(self.word(prompt))
        except ValueError:
            return None


def _current_world(store):
    try:
        world = store.read()
    except FileNotFoundError:
        return None
    return None if world.shutdown else world


def _require_world(store):
    world = _current_world(store)
    if world is None:
        raise _SessionOver
    return world


def _register(store, con):
    name = con.word("Username: ")
    _require_world(store)
    with store.transaction() as world:
        try:
            world.register(name)
        except ValueError:
            con.say("Hunter already registered\nRegistration failed.\n")
            return
        except OverflowError:
            con.say("Registration failed.\n")
            return
    con.say("Registration success!\n")


def _list_dungeons(world, hunter, con):
    con.say("\n=== AVAILABLE DUNGEON ===\n")
    for number, dungeon in world.available_dungeons(hunter.level):
        con.say(f"{number}. {dungeon.name} (Level {dungeon.min_level}+)\n")
    con.line("Press enter to continue...")


def _raid(store, world, hunter, con):
    _list_dungeons(world, hunter, con)
    choice = con.number("Choose dungeon: ")
    try:
        with store.transaction() as current:
            dungeon = current.raid(hunter.username, 0 if choice is None else choice)
    except (KeyError, ValueError):
        con.say("Invalid dungeon.\n")
        return
    con.say(
        f"Raid success! Gained: ATK: {dungeon.reward_atk}, HP: {dungeon.reward_hp}, "
        f"DEF: {dungeon.reward_def}, EXP: {dungeon.reward_exp}\n"
    )
    con.line("Press enter to continue...")


def _battle(store, world, hunter, con):
    con.say("=== PVP LIST ===\n")
    for other in world.hunters:
        if other is not None and other.username != hunter.username:
            power = other.atk + other.hp + other.defense
            con.say(f"{other.username} - Total Power: {power}\n")
    target = con.word("Target: ")
    try:
        with store.transaction() as current:
            won, my_power, opponent_power = current.battle(hunter.username, target)
    except (KeyError, ValueError):
        return
    con.say(
        f"You chose to battle {target}\n"
        f"Your Power: {my_power}\nOpponent's Power: {opponent_power}\n"
    )
    if not won:
        con.say("You lost and your data is deleted.\n")
        raise _SessionOver
    con.say(f"Battle won! You acquired {target}'s stats\n")
    con.line("Press enter to continue...")


def _set_notification(store, name, active):
    if _current_world(store) is None:
        return
    with store.transaction() as world:
        hunter = world.find_hunter(name)
        if hunter is not None:
            hunter.notif_active = active


def _toggle_notification(store, name, con):
    _require_world(store)
    with store.transaction() as world:
        hunter = world.find_hunter(name)
        if hunter is None:
            return
        hunter.notif_active = not hunter.notif_active
        active = hunter.notif_active
    if not active:
        con.say("Notification deactivated!\n")
        return
    con.say("Notification activated!\n")
    try:
        while True:
            world = _current_world(store)
            hunter = None if world is None else world.find_hunter(name)
            if hunter is None or not hunter.notif_active:
                return
            con.say(CLEAR_SCREEN)
            available = world.available_dungeons(hunter.level)
            if available:
                con.say(f"D-Rank Dungeon for minimum level {available[0][1].min_level} opened!\n")
            time.sleep(NOTIFY_INTERVAL)
    except KeyboardInterrupt:
        _set_notification(store, name, False)
        con.say("\nNotification deactivated!\n")


def _hunter_session(store, name, con):
    while True:
        world = _require_world(store)
        hunter = world.find_hunter(name)
        if hunter is None:
            con.say("Hunter data not found.\n")
            return
        if hunter.banned:
            con.say("You are banned from raiding or battling.\n")
        choice = con.number(
            f"\n=== {name}'s MENU ===\n"
            "1. List dungeon\n2. Raid\n3. Battle\n4. Toggle Notification\n5. Exit\nChoice: "
        )
        if choice == 1:
            _list_dungeons(world, hunter, con)
        elif choice == 2 and not hunter.banned:
            _raid(store, world, hunter, con)
        elif choice == 3 and not hunter.banned:
            _battle(store, world, hunter, con)
        elif choice == 4:
            _toggle_notification(store, name, con)
        elif choice == 5:
            return


def _login(store, con):
    name = con.word("Username: ")
    world = _require_world(store)
    if world.find_hunter(name) is None:
        con.say("Login failed.\n")
        return
    con.say("Login success!\n")
    _hunter_session(store, name, con)


def run_hunter(store, input_stream=None, output_stream=None):
    """Run the hunter menu until the user exits, the input ends or the system shuts down."""
    con = _Console(
        sys.stdin if input_stream is None else input_stream,
        sys.stdout if output_stream is None else output_stream,
    )
    try:
        while _current_world(store) is not None:
            choice = con.number(MAIN_MENU)
            if choice == 1:
                _register(store, con)
            elif choice == 2:
                _login(store, con)
            elif choice == 3:
                break
    except (EOFError, KeyboardInterrupt, _SessionOver):
        pass
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Hunter menu.")
    parser.add_argument("--store", default=DEFAULT_STORE_PATH)
    args = parser.parse_args(argv)
    store = WorldStore(args.store)
    try:
        store.read()
    except FileNotFoundError:
        print("System not running. Start the system menu first.")
        return 1
    return run_hunter(store)


if __name__ == "__main__":
    sys.exit(main())