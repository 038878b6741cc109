"""Terminal programs: an image relay, delivery dispatch, a dungeon RPG and a hunter arena."""

__version__ = "0.1.0"