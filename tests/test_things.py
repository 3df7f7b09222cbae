import pytest

from wadtools.things import (
    DEFAULT_RADIUS,
    THING_DEFS,
    ThingClass,
    is_monster,
    is_player,
    thing_radius,
)


@pytest.mark.parametrize("thing_type", [68, 3005, 3001, 7, 84])
def test_monsters(thing_type):
    assert is_monster(thing_type)
    assert not is_player(thing_type)


@pytest.mark.parametrize("thing_type", [1, 2, 3, 4, 11])
def test_player_starts(thing_type):
    assert is_player(thing_type)
    assert not is_monster(thing_type)


def test_unknown_thing_is_neither():
    assert not is_monster(2011)
    assert not is_player(2011)


def test_radius_of_known_thing():
    assert thing_radius(7) == 128
    assert thing_radius(3005) == THING_DEFS[3005].radius


def test_radius_of_unknown_thing_is_default():
    assert thing_radius(2011) == DEFAULT_RADIUS


def test_definition_fields():
    definition = THING_DEFS[3005]
    assert definition.sprite == "HEAD"
    assert definition.thing_class is ThingClass.MONSTER
    assert all(d.version == 2 for d in THING_DEFS.values())