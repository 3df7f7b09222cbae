"""Definitions of the map things the explorer knows how to draw."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

THING_LEVEL1_2 = 0x0001
THING_LEVEL3 = 0x0002
THING_LEVEL4_5 = 0x0004
THING_DEAF = 0x0008
THING_NO_SINGLE_PLAYER = 0x0010

DEFAULT_RADIUS = 15


class ThingClass(Enum):
    ARTIFACT = 0
    PICKUP = 1
    WEAPON = 2
    MONSTER = 3
    OBSTACLE = 4
    HANG = 5
    PLAYER_SPAWN = 6


@dataclass(frozen=True)
class ThingDef:
    """What is known about one kind of thing."""

    version: int
    radius: int
    sprite: str
    thing_class: ThingClass


def _monster(radius: int, sprite: str) -> ThingDef:
    return ThingDef(2, radius, sprite, ThingClass.MONSTER)


_PLAYER = ThingDef(2, 16, "PLAY", ThingClass.PLAYER_SPAWN)

THING_DEFS: dict[int, ThingDef] = {
    68: _monster(64, "BSPI"),  # Arachnotron
    64: _monster(20, "VILE"),  # Arch-Vile
    3003: _monster(24, "BOSS"),  # Baron of Hell
    3005: _monster(31, "HEAD"),  # Cacodemon
    65: _monster(20, "CPOS"),  # Chaingunner
    72: _monster(16, "KEEN"),  # Commander Keen
    16: _monster(40, "CYBR"),  # Cyberdemon
    3002: _monster(30, "SARG"),  # Demon
    3004: _monster(20, "POSS"),  # Former Human Trooper
    9: _monster(20, "SPOS"),  # Sergeant
    69: _monster(24, "BOS2"),  # Hell Knight
    3001: _monster(20, "TROO"),  # Imp
    3006: _monster(16, "SKUL"),  # Lost Soul
    67: _monster(48, "FATT"),  # Mancubus
    71: _monster(31, "PAIN"),  # Pain Elemental
    66: _monster(20, "SKEL"),  # Revenant
    58: _monster(30, "SARG"),  # Spectre
    7: _monster(128, "SPID"),  # Spider Mastermind
    84: _monster(20, "SSWV"),  # Wolfenstein SS
    1: _PLAYER,
    2: _PLAYER,
    3: _PLAYER,
    4: _PLAYER,
    11: _PLAYER,
}


def _class_of(thing_type: int) -> ThingClass | None:
    definition = THING_DEFS.get(thing_type)
    return definition.thing_class if definition else None


def is_monster(thing_type: int) -> bool:
    """Whether *thing_type* is a known monster."""
    return _class_of(thing_type) is ThingClass.MONSTER


def is_player(thing_type: int) -> bool:
    """Whether *thing_type* is a player start."""
    return _class_of(thing_type) is ThingClass.PLAYER_SPAWN


def thing_radius(thing_type: int) -> int:
    """The drawing radius of *thing_type*, or the default for unknown things."""
    definition = THING_DEFS.get(thing_type)
    return definition.radius if definition else DEFAULT_RADIUS