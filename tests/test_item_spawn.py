import json

import pytest

from item_test_utils import ROOM, floor_grid, small_table

from roguegen.dungeon.config import DEFAULT_CATEGORY_WEIGHTS, WAND_RANGES
from roguegen.models import ItemType, Position, PotionType, RingType, Room
from roguegen.random_source import QueuedRandom, SeededRandom
from roguegen.services.guarantees import GuaranteeConfig
from roguegen.services.item_spawn import ItemSpawnService
from roguegen.services.item_templates import load_item_templates, parse_item_data

# Draw order for one spawn attempt: room, x, y, rarity, category, [light
# sub-roll], id, template, [artifact chance, artifact pick], curse, enchantment.


def _spawn_one(values, depth=1):
    rng = QueuedRandom(values)
    service = ItemSpawnService(rng, templates=small_table())
    items = service.spawn_items([ROOM], 1, floor_grid(), [], depth)
    assert rng.index == len(rng.values), "every queued draw should be consumed"
    return items


def test_common_weapon_spawn():
    items = _spawn_one([0, 15, 15, 0.1, 0.05, 1234, 0, 0, 0])
    assert len(items) == 1
    item = items[0]
    assert item.id == "item-1-0-1234"
    assert item.name == "Dagger"
    assert item.type is ItemType.WEAPON
    assert item.position == Position(15, 15)
    assert item.bonus == 0 and not item.cursed
    assert not item.identified


def test_cursed_weapon_hides_negative_bonus():
    item = _spawn_one([0, 15, 15, 0.1, 0.05, 1234, 0, 1, 2])[0]
    assert item.cursed
    assert item.bonus == -2
    assert item.name == "Dagger"


def test_teleportation_ring_always_cursed_without_curse_roll():
    item = _spawn_one([0, 15, 15, 0.1, 0.61, 1234, 0, 1])[0]
    assert item.type is ItemType.RING
    assert item.data.ring_type is RingType.TELEPORTATION
    assert item.cursed
    assert item.bonus == -1


def test_torch_is_identified():
    item = _spawn_one([0, 15, 15, 0.1, 0.9, 0.1, 1234])[0]
    assert item.type is ItemType.TORCH
    assert item.identified
    assert item.data.fuel == 500
    assert not item.data.is_permanent


def test_artifact_light_possible_from_depth_eight():
    item = _spawn_one([0, 15, 15, 0.1, 0.95, 0.1, 1234, 1, 0], depth=8)[0]
    assert item.type is ItemType.ARTIFACT
    assert item.name == "Phial of Galadriel"
    assert item.data.is_permanent
    assert item.data.fuel is None


def test_occupied_tile_skips_attempt():
    rng = QueuedRandom([0, 15, 15])
    service = ItemSpawnService(rng, templates=small_table())
    items = service.spawn_items([ROOM], 1, floor_grid(), [], 1, occupied={Position(15, 15)})
    assert items == []
    assert rng.index == 3


def test_monster_tile_skips_attempt():
    class _M:
        position = Position(12, 12)

    rng = QueuedRandom([0, 12, 12])
    service = ItemSpawnService(rng, templates=small_table())
    assert service.spawn_items([ROOM], 1, floor_grid(), [_M()], 1) == []


def test_no_rooms_spawns_nothing():
    service = ItemSpawnService(QueuedRandom([]), templates=small_table())
    assert service.spawn_items([], 5, floor_grid(), [], 1) == []


def test_healing_potion_depth_window():
    service = ItemSpawnService(QueuedRandom([0]), templates=small_table())
    # the minor heal window ends before depth 12
    assert service._pick_template("potion", "common", 12) is None
    medium = service._pick_template("potion", "uncommon", 12)
    assert medium.subtype is PotionType.MEDIUM_HEAL


def test_power_tier_gates_templates():
    service = ItemSpawnService(QueuedRandom([]), templates=small_table())
    # medium heal is in its depth window at 8 but intermediate unlocks at 9
    assert service._pick_template("potion", "uncommon", 8) is None


def test_packaged_wands_use_configured_ranges():
    table = load_item_templates()
    service = ItemSpawnService(SeededRandom("wands"), templates=table)
    for template in table.for_category("wand"):
        item = service._build_item(template, 5, "item-5-0-1000", Position(1, 1))
        assert item.data.range == WAND_RANGES[template.subtype]
        assert item.data.charges == item.data.current_charges
        assert item.data.charges >= 1


def test_packaged_data_loads():
    table = load_item_templates()
    assert len(table.for_category("potion")) == 15
    assert len(table.for_category("scroll")) == 11
    assert table.first("torch") is not None
    assert table.first("oil_flask") is not None
    assert table.for_category("artifact")


def test_missing_item_file_falls_back(tmp_path, capsys):
    table = load_item_templates(tmp_path / "missing.json")
    assert len(table) > 0
    assert "item_data_fallback" in capsys.readouterr().err


def test_item_file_override_from_env(tmp_path, monkeypatch):
    path = tmp_path / "items.json"
    path.write_text(json.dumps({"weapons": [{"name": "Club", "damage": "1d4"}]}), encoding="utf-8")
    monkeypatch.setenv("ROGUEGEN_ITEM_DATA", str(path))
    table = load_item_templates()
    assert [t.name for t in table.for_category("weapon")] == ["Club"]


@pytest.mark.parametrize(
    "data",
    [
        {"potions": [{"type": "ELIXIR_OF_LIFE"}]},
        {"gems": []},
        {"weapons": [{"name": "Stick", "damage": "lots"}]},
        {"weapons": [{"name": "Stick", "damage": "1d4", "rarity": "mythic"}]},
        {"potions": [{"type": "MINOR_HEAL", "minDepth": 10, "maxDepth": 2}]},
        {"lightSources": [{"type": "candle", "name": "Candle"}]},
    ],
)
def test_malformed_item_data_raises(data):
    with pytest.raises(ValueError):
        parse_item_data(data)


def test_narrow_room_draw_outside_footprint_skips_attempt():
    narrow = Room(0, 10, 10, 5, 1)
    rng = QueuedRandom([0, 12, 11])
    service = ItemSpawnService(rng, templates=small_table())
    assert service.spawn_items([narrow], 1, floor_grid(), [], 1) == []
    assert rng.index == 3


def test_category_override_merges_over_band_defaults():
    override = GuaranteeConfig(category_weights={"1-5": {"potion": 1000}})
    service = ItemSpawnService(QueuedRandom([]), templates=small_table(), guarantees=override)
    weights = service.category_weights(3)
    assert weights["potion"] == 1000
    defaults = DEFAULT_CATEGORY_WEIGHTS["1-5"]
    assert {k: v for k, v in weights.items() if k != "potion"} == {k: v for k, v in defaults.items() if k != "potion"}


def test_category_override_moves_the_roll():
    # 0.2 of the default total (100) lands in armor; of 1080 it lands in potion
    plain = ItemSpawnService(QueuedRandom([0.2]), templates=small_table())
    assert plain.roll_category(1) == "armor"
    override = GuaranteeConfig(category_weights={"1-5": {"potion": 1000}})
    boosted = ItemSpawnService(QueuedRandom([0.2]), templates=small_table(), guarantees=override)
    assert boosted.roll_category(1) == "potion"


def test_category_override_spawns_potion():
    override = GuaranteeConfig(category_weights={"1-5": {"potion": 1000}})
    rng = QueuedRandom([0, 15, 15, 0.1, 0.2, 1234, 0])
    service = ItemSpawnService(rng, templates=small_table(), guarantees=override)
    (item,) = service.spawn_items([ROOM], 1, floor_grid(), [], 1)
    assert item.type is ItemType.POTION
    assert item.name == "Potion of Minor Heal"
    assert rng.index == len(rng.values)
