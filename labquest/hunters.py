"""Hunters, dungeons and the world state shared between the system and hunter menus."""

from __future__ import annotations

import json
import os
import random
import tempfile
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path

from filelock import FileLock

MAX_HUNTERS = 100
MAX_DUNGEONS = 100
LEVEL_UP_EXP = 500
DEFAULT_STORE_PATH = Path("hunter_world.json")


@dataclass
class Hunter:
    """A registered hunter and their stats."""

    username: str
    level: int = 1
    exp: int = 0
    atk: int = 10
    hp: int = 100
    defense: int = 5
    banned: bool = False
    notif_active: bool = False


@dataclass
class Dungeon:
    """A dungeon open for raiding, with its entry level and rewards."""

    name: str
    min_level: int
    reward_exp: int
    reward_atk: int
    reward_hp: int
    reward_def: int
    key: int = 0


def _power(hunter):
    return hunter.atk + hunter.hp + hunter.defense


@dataclass
class World:
    """Fixed-size slot tables of hunters and dungeons; empty slots hold None."""

    hunters: list = field(default_factory=lambda: [None] * MAX_HUNTERS)
    dungeons: list = field(default_factory=lambda: [None] * MAX_DUNGEONS)
    shutdown: bool = False

    def _slot_of(self, name):
        return next(
            (i for i, h in enumerate(self.hunters) if h is not None and h.username == name),
            None,
        )

    def _require(self, name):
        hunter = self.find_hunter(name)
        if hunter is None:
            raise KeyError(name)
        return hunter

    def find_hunter(self, name):
        """Return the hunter called ``name``, or None."""
        slot = self._slot_of(name)
        return None if slot is None else self.hunters[slot]

    def register(self, name):
        """Add a new hunter in the first free slot.

        Raises ValueError if the name is taken and OverflowError if no slot is free.
        """
        if self.find_hunter(name) is not None:
            raise ValueError("Hunter already registered")
        try:
            slot = self.hunters.index(None)
        except ValueError:
            raise OverflowError("no free hunter slot") from None
        hunter = Hunter(name)
        self.hunters[slot] = hunter
        return hunter

    def available_dungeons(self, level):
        """Return ``(number, dungeon)`` pairs open to a hunter of ``level``."""
        return [
            (number, dungeon)
            for number, dungeon in enumerate(self.dungeons, start=1)
            if dungeon is not None and dungeon.min_level <= level
        ]

    def raid(self, name, dungeon_number):
        """Raid dungeon ``dungeon_number`` (1-based), collect its rewards and close it.

        Raises KeyError for an unknown hunter and ValueError for a dungeon
        that does not exist or is above the hunter's level.
        """
        hunter = self._require(name)
        if not 1 <= dungeon_number <= MAX_DUNGEONS:
            raise ValueError("Invalid dungeon.")
        dungeon = self.dungeons[dungeon_number - 1]
        if dungeon is None or dungeon.min_level > hunter.level:
            raise ValueError("Invalid dungeon.")
        hunter.atk += dungeon.reward_atk
        hunter.hp += dungeon.reward_hp
        hunter.defense += dungeon.reward_def
        hunter.exp += dungeon.reward_exp
        if hunter.exp >= LEVEL_UP_EXP:
            hunter.level += 1
            hunter.exp = 0
        self.dungeons[dungeon_number - 1] = None
        return dungeon

    def battle(self, name, target):
        """Fight ``target``; the winner takes the loser's stats and the loser is deleted.

        Returns ``(won, my_power, opponent_power)``. Raises KeyError for an
        unknown hunter and ValueError when a hunter targets themselves.
        """
        mine = self._slot_of(name)
        if mine is None:
            raise KeyError(name)
        theirs = self._slot_of(target)
        if theirs is None:
            raise KeyError(target)
        if mine == theirs:
            raise ValueError("a hunter cannot battle themselves")
        me, opponent = self.hunters[mine], self.hunters[theirs]
        my_power, opponent_power = _power(me), _power(opponent)
        won = my_power >= opponent_power
        winner, loser, loser_slot = (me, opponent, theirs) if won else (opponent, me, mine)
        winner.atk += loser.atk
        winner.hp += loser.hp
        winner.defense += loser.defense
        self.hunters[loser_slot] = None
        return won, my_power, opponent_power

    def generate_dungeon(self, rng=None):
        """Create a random dungeon in the first free slot; OverflowError if none is free."""
        rng = random.Random() if rng is None else rng
        try:
            slot = self.dungeons.index(None)
        except ValueError:
            raise OverflowError("Dungeon list full.") from None
        dungeon = Dungeon(
            name=f"Dungeon{slot + 1}",
            min_level=rng.randint(1, 5),
            reward_exp=rng.randint(150, 300),
            reward_atk=rng.randint(100, 150),
            reward_hp=rng.randint(50, 100),
            reward_def=rng.randint(25, 50),
            key=rng.getrandbits(31),
        )
        self.dungeons[slot] = dungeon
        return dungeon

    def set_banned(self, name, banned):
        """Ban or unban a hunter; KeyError if unknown."""
        hunter = self._require(name)
        hunter.banned = banned
        return hunter

    def reset_hunter(self, name):
        """Restore a hunter's level and stats to their starting values; KeyError if unknown."""
        hunter = self._require(name)
        fresh = Hunter(name)
        hunter.level = fresh.level
        hunter.exp = fresh.exp
        hunter.atk = fresh.atk
        hunter.hp = fresh.hp
        hunter.defense = fresh.defense
        return hunter


def _world_to_json(world):
    return {
        "hunters": [None if h is None else asdict(h) for h in world.hunters],
        "dungeons": [None if d is None else asdict(d) for d in world.dungeons],
        "shutdown": world.shutdown,
    }


def _world_from_json(data):
    return World(
        hunters=[None if h is None else Hunter(**h) for h in data["hunters"]],
        dungeons=[None if d is None else Dungeon(**d) for d in data["dungeons"]],
        shutdown=data.get("shutdown", False),
    )


class WorldStore:
    """The world kept in a locked JSON file shared between processes."""

    def __init__(self, path=DEFAULT_STORE_PATH):
        self.path = Path(path)
        self._lock = FileLock(str(self.path) + ".lock")

    def _load(self):
        return _world_from_json(json.loads(self.path.read_text(encoding="utf-8")))

    def _save(self, world):
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(_world_to_json(world), f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def read(self):
        """Return a snapshot of the world; FileNotFoundError if the system is not running."""
        with self._lock:
            return self._load()

    @contextmanager
    def transaction(self):
        """Yield the world for editing, starting a fresh one if none is stored.

        Changes are saved unless the block raises.
        """
        with self._lock:
            try:
                world = self._load()
            except FileNotFoundError:
                world = World()
            yield world
            self._save(world)

    def remove(self):
        """Delete the stored world."""
        with self._lock:
            self.path.unlink(missing_ok=True)