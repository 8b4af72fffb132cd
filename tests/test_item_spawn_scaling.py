import pytest

from roguegen.dungeon.config import MAX_DEPTH
from roguegen.services.item_spawn import (
    calculate_curse_chance,
    calculate_enchantment_range,
    calculate_rarity_weights,
)


def test_rarity_weights_at_depth_one():
    w = calculate_rarity_weights(1)
    assert w["common"] == pytest.approx(68.46, abs=0.01)
    assert w["uncommon"] == pytest.approx(25.58, abs=0.01)
    assert w["rare"] == pytest.approx(5.96, abs=0.01)


def test_rarity_weights_at_max_depth():
    assert calculate_rarity_weights(MAX_DEPTH) == pytest.approx({"common": 30.0, "uncommon": 40.0, "rare": 30.0})


def test_rarity_weights_shift_smoothly():
    prev = calculate_rarity_weights(1)
    for depth in range(2, MAX_DEPTH + 1):
        cur = calculate_rarity_weights(depth)
        assert cur["common"] <= prev["common"]
        assert cur["uncommon"] >= prev["uncommon"]
        assert cur["rare"] >= prev["rare"]
        # one depth never moves a weight by more than a couple of points
        for key in cur:
            assert abs(cur[key] - prev[key]) < 2.0
        prev = cur


def test_rarity_common_floor():
    assert calculate_rarity_weights(40)["common"] == 30.0


@pytest.mark.parametrize(
    "depth,rarity,expected",
    [
        (1, "common", (0, 0)),
        (1, "rare", (1, 1)),
        (6, "common", (0, 1)),
        (9, "uncommon", (1, 1)),
        (18, "common", (2, 3)),
        (26, "common", (2, 5)),
        (26, "rare", (3, 5)),
    ],
)
def test_enchantment_ranges(depth, rarity, expected):
    assert tuple(calculate_enchantment_range(depth, rarity)) == expected


def test_enchantment_ranges_well_formed_at_every_depth():
    for depth in range(1, MAX_DEPTH + 1):
        common = calculate_enchantment_range(depth, "common")
        rare = calculate_enchantment_range(depth, "rare")
        assert 0 <= common.min_bonus <= common.max_bonus <= 5
        assert 0 <= rare.min_bonus <= rare.max_bonus <= 5
        assert rare.min_bonus == min(5, common.min_bonus + 1)
        assert calculate_enchantment_range(depth, "uncommon") == common


def test_curse_chance_scales_down_with_depth():
    assert calculate_curse_chance(0.05, 1) == pytest.approx(0.0645)
    assert calculate_curse_chance(0.12, 26) == pytest.approx(0.12 * 1.04)
    assert calculate_curse_chance(0.05, 10) > calculate_curse_chance(0.05, 20)


def test_curse_chance_never_negative():
    assert calculate_curse_chance(0.05, 200) == 0.0
