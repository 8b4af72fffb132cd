import pytest

from item_test_utils import open_level, small_table

from roguegen.dungeon.tiles import new_grid
from roguegen.models import GoldPile, ItemType, Position, PotionType, PowerTier
from roguegen.random_source import QueuedRandom, SeededRandom
from roguegen.services.guarantees import ItemDeficit
from roguegen.services.item_spawn import ItemSpawnService

BASIC = (PowerTier.BASIC,)


def _service(values):
    return ItemSpawnService(QueuedRandom(values), templates=small_table())


def test_forced_healing_potion():
    level = open_level()
    spawned = _service([0, 15, 15, 0, 1234]).force_spawn_for_guarantees(level, [ItemDeficit("healingPotions", 1, BASIC)])
    assert len(spawned) == 1
    item = spawned[0]
    assert item.id == "item-1-0-1234"
    assert item.name == "Potion of Minor Heal"
    assert item.data.potion_type is PotionType.MINOR_HEAL
    assert item.position == Position(15, 15)
    assert level.items == spawned


def test_forced_spawn_retries_occupied_tiles():
    level = open_level()
    level.gold.append(GoldPile(Position(15, 15), 10))
    spawned = _service([0, 15, 15, 0, 16, 16, 0, 1234]).force_spawn_for_guarantees(
        level, [ItemDeficit("healingPotions", 1, BASIC)]
    )
    assert spawned[0].position == Position(16, 16)


def test_forced_spawn_keeps_off_stairs():
    level = open_level()
    level.stairs_down = Position(15, 15)
    spawned = _service([0, 15, 15, 0, 13, 13, 0, 1234]).force_spawn_for_guarantees(
        level, [ItemDeficit("healingPotions", 1, BASIC)]
    )
    assert spawned[0].position == Position(13, 13)


def test_forced_wand_rolls_charges():
    level = open_level()
    spawned = _service([0, 12, 12, 0, 1234, 5]).force_spawn_for_guarantees(level, [ItemDeficit("wands", 1, BASIC)])
    wand = spawned[0]
    assert wand.type is ItemType.WAND
    assert wand.data.charges == 5 and wand.data.current_charges == 5
    assert wand.data.range == 7


def test_forced_weapon_is_plain():
    level = open_level()
    spawned = _service([0, 15, 15, 0, 1234]).force_spawn_for_guarantees(level, [ItemDeficit("weapons", 1, BASIC)])
    weapon = spawned[0]
    assert weapon.name == "Dagger"
    assert not weapon.cursed and weapon.bonus == 0


def test_forced_spawn_respects_tiers_and_depth():
    # medium heal needs the intermediate tier and depth >= 8
    level = open_level(depth=10)
    service = _service([])
    assert service.force_spawn_for_guarantees(level, [ItemDeficit("healingPotions", 1, BASIC)]) == []
    assert level.items == []


def test_forced_spawn_counts_item_ids_from_existing_items():
    level = open_level()
    service = _service([0, 15, 15, 0, 1111, 0, 16, 16, 0, 2222])
    spawned = service.force_spawn_for_guarantees(level, [ItemDeficit("healingPotions", 2, BASIC)])
    assert [i.id for i in spawned] == ["item-1-0-1111", "item-1-1-2222"]


def test_unknown_deficit_category_raises():
    with pytest.raises(ValueError):
        _service([]).force_spawn_for_guarantees(open_level(), [ItemDeficit("powerfulItems", 1, BASIC)])


def test_no_free_floor_spawns_nothing():
    level = open_level(tiles=new_grid(80, 22))
    service = ItemSpawnService(SeededRandom("walls"), templates=small_table())
    assert service.force_spawn_for_guarantees(level, [ItemDeficit("food", 2, BASIC)]) == []
    assert level.items == []
