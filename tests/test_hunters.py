import random

import pytest

from labquest.hunters import (
    LEVEL_UP_EXP,
    MAX_DUNGEONS,
    MAX_HUNTERS,
    Dungeon,
    Hunter,
    World,
    WorldStore,
)


def _dungeon(min_level=1, reward_exp=200):
    return Dungeon("Dungeon1", min_level, reward_exp, 120, 60, 30, 7)


def _world_with_dungeon(**kwargs):
    world = World()
    world.dungeons[0] = _dungeon(**kwargs)
    return world


def test_register_creates_starting_hunter():
    world = World()
    hunter = world.register("alice")
    assert world.find_hunter("alice") is hunter
    assert (hunter.level, hunter.exp, hunter.atk, hunter.hp, hunter.defense) == (1, 0, 10, 100, 5)
    assert not hunter.banned


def test_register_duplicate_raises():
    world = World()
    world.register("alice")
    with pytest.raises(ValueError):
        world.register("alice")
    assert sum(h is not None for h in world.hunters) == 1


def test_register_full_raises():
    world = World()
    for i in range(MAX_HUNTERS):
        world.register(f"h{i}")
    with pytest.raises(OverflowError):
        world.register("late")


def test_register_reuses_first_free_slot():
    world = World()
    world.register("a")
    world.register("b")
    world.hunters[0] = None
    world.register("c")
    assert world.hunters[0].username == "c"


def test_raid_grants_rewards_and_closes_dungeon():
    world = _world_with_dungeon()
    hunter = world.register("alice")
    before = Hunter("alice")
    dungeon = world.raid("alice", 1)
    assert hunter.atk == before.atk + dungeon.reward_atk
    assert hunter.hp == before.hp + dungeon.reward_hp
    assert hunter.defense == before.defense + dungeon.reward_def
    assert hunter.exp == dungeon.reward_exp
    assert world.dungeons[0] is None


def test_raid_levels_up_and_resets_exp():
    world = _world_with_dungeon(reward_exp=300)
    hunter = world.register("alice")
    hunter.exp = LEVEL_UP_EXP - 1
    world.raid("alice", 1)
    assert (hunter.level, hunter.exp) == (2, 0)


@pytest.mark.parametrize("number", [0, MAX_DUNGEONS + 1, 2])
def test_raid_rejects_missing_dungeon(number):
    world = _world_with_dungeon()
    world.register("alice")
    with pytest.raises(ValueError):
        world.raid("alice", number)


def test_raid_rejects_dungeon_above_level():
    world = _world_with_dungeon(min_level=3)
    world.register("alice")
    with pytest.raises(ValueError):
        world.raid("alice", 1)
    assert world.dungeons[0] is not None and world.dungeons[0].min_level == 3


def test_raid_unknown_hunter():
    world = _world_with_dungeon()
    with pytest.raises(KeyError):
        world.raid("ghost", 1)


def test_available_dungeons_filters_by_level():
    world = World()
    world.dungeons[0] = _dungeon(min_level=1)
    world.dungeons[4] = _dungeon(min_level=4)
    assert [n for n, _ in world.available_dungeons(1)] == [1]
    assert [n for n, _ in world.available_dungeons(4)] == [1, 5]


def test_battle_winner_takes_stats():
    world = World()
    alice = world.register("alice")
    bob = world.register("bob")
    alice.atk += 50
    bob_stats = (bob.atk, bob.hp, bob.defense)
    alice_before = (alice.atk, alice.hp, alice.defense)
    won, mine, theirs = world.battle("alice", "bob")
    assert won
    assert mine == sum(alice_before) and theirs == sum(bob_stats)
    assert (alice.atk, alice.hp, alice.defense) == tuple(
        a + b for a, b in zip(alice_before, bob_stats)
    )
    assert world.find_hunter("bob") is None


def test_battle_tie_goes_to_challenger():
    world = World()
    world.register("alice")
    world.register("bob")
    won, mine, theirs = world.battle("alice", "bob")
    assert won and mine == theirs


def test_battle_loser_is_deleted():
    world = World()
    world.register("alice")
    bob = world.register("bob")
    bob.atk += 1
    bob_atk = bob.atk
    won, _, _ = world.battle("alice", "bob")
    assert not won
    assert world.find_hunter("alice") is None
    assert bob.atk == bob_atk + Hunter("alice").atk


def test_battle_errors():
    world = World()
    world.register("alice")
    with pytest.raises(KeyError):
        world.battle("alice", "ghost")
    with pytest.raises(ValueError):
        world.battle("alice", "alice")


def test_generate_dungeon_ranges_and_names():
    world = World()
    rng = random.Random(1)
    first = world.generate_dungeon(rng)
    second = world.generate_dungeon(rng)
    assert (first.name, second.name) == ("Dungeon1", "Dungeon2")
    for d in (first, second):
        assert 1 <= d.min_level <= 5
        assert 150 <= d.reward_exp <= 300
        assert 100 <= d.reward_atk <= 150
        assert 50 <= d.reward_hp <= 100
        assert 25 <= d.reward_def <= 50
    world.dungeons[0] = None
    assert world.generate_dungeon(rng).name == "Dungeon1"


def test_generate_dungeon_is_seeded():
    a = World().generate_dungeon(random.Random(9))
    b = World().generate_dungeon(random.Random(9))
    assert a == b


def test_generate_dungeon_full():
    world = World()
    for _ in range(MAX_DUNGEONS):
        world.generate_dungeon(random.Random(0))
    with pytest.raises(OverflowError):
        world.generate_dungeon(random.Random(0))


def test_ban_and_reset():
    world = World()
    hunter = world.register("alice")
    world.set_banned("alice", True)
    assert hunter.banned
    world.set_banned("alice", False)
    assert not hunter.banned
    hunter.atk, hunter.level, hunter.exp = 999, 4, 42
    world.reset_hunter("alice")
    fresh = Hunter("alice")
    assert (hunter.atk, hunter.level, hunter.exp) == (fresh.atk, fresh.level, fresh.exp)
    with pytest.raises(KeyError):
        world.set_banned("ghost", True)
    with pytest.raises(KeyError):
        world.reset_hunter("ghost")


def test_store_round_trip(tmp_path):
    store = WorldStore(tmp_path / "world.json")
    with pytest.raises(FileNotFoundError):
        store.read()
    with store.transaction() as world:
        world.register("alice").atk = 77
        world.dungeons[2] = _dungeon()
    loaded = store.read()
    assert loaded.find_hunter("alice").atk == 77
    assert loaded.dungeons[2] == _dungeon()
    assert len(loaded.hunters) == MAX_HUNTERS


def test_store_transaction_discards_on_error(tmp_path):
    store = WorldStore(tmp_path / "world.json")
    with store.transaction() as world:
        world.register("alice")
    with pytest.raises(RuntimeError):
        with store.transaction() as world:
            world.register("bob")
            raise RuntimeError("boom")
    assert store.read().find_hunter("bob") is None


def test_store_remove(tmp_path):
    store = WorldStore(tmp_path / "world.json")
    with store.transaction():
        pass
    store.remove()
    assert not store.path.exists()
    store.remove()
    with pytest.raises(FileNotFoundError):
        store.read()