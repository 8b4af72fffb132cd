import pytest

from roguegen.random_source import QueuedRandom, SeededRandom, hash_seed, parse_dice


def test_hash_seed_matches_31_multiplier_hash():
    assert hash_seed("") == 0
    assert hash_seed("a") == 97
    assert hash_seed("ab") == 97 * 31 + 98


def test_hash_seed_is_non_negative_for_long_strings():
    assert hash_seed("a much longer seed string that overflows 32 bits") >= 0


def test_first_draw_follows_lcg_step():
    rng = SeededRandom(5)
    expected_state = (5 * 1103515245 + 12345) & 0x7FFFFFFF
    assert rng.next() == expected_state / 2**31


@pytest.mark.parametrize("seed", ["alpha", "beta", 0, 42, 2**40])
def test_next_stays_in_unit_interval(seed):
    rng = SeededRandom(seed)
    for _ in range(2000):
        v = rng.next()
        assert 0.0 <= v < 1.0


def test_same_seed_same_sequence():
    a = SeededRandom("replay")
    b = SeededRandom("replay")
    assert [a.next_int(0, 1000) for _ in range(50)] == [b.next_int(0, 1000) for _ in range(50)]


def test_different_seeds_diverge():
    a = SeededRandom("one")
    b = SeededRandom("two")
    assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]


def test_next_int_is_inclusive():
    rng = SeededRandom("bounds")
    seen = {rng.next_int(1, 4) for _ in range(500)}
    assert seen == {1, 2, 3, 4}


def test_roll_ranges_and_modifier():
    rng = SeededRandom("dice")
    for _ in range(200):
        assert 2 <= rng.roll("2d6") <= 12
        assert 3 <= rng.roll("1d4+2") <= 6
        assert 0 <= rng.roll("1d4-1") <= 3


@pytest.mark.parametrize("bad", ["", "d6", "two dice", "6"])
def test_roll_rejects_malformed_notation(bad):
    with pytest.raises(ValueError):
        SeededRandom("dice").roll(bad)


def test_parse_dice_fields():
    assert parse_dice("3d8+2") == (3, 8, 2)
    assert parse_dice("1d10") == (1, 10, 0)


def test_shuffle_returns_new_list_with_same_items():
    rng = SeededRandom("shuffle")
    items = list(range(20))
    out = rng.shuffle(items)
    assert items == list(range(20))
    assert sorted(out) == items
    assert out is not items


def test_pick_random_empty_raises():
    with pytest.raises(ValueError):
        SeededRandom("x").pick_random([])


def test_chance_extremes():
    rng = SeededRandom("chance")
    assert not any(rng.chance(0.0) for _ in range(100))
    assert all(rng.chance(1.0) for _ in range(100))


def test_state_round_trip_resumes_stream():
    rng = SeededRandom("state")
    for _ in range(7):
        rng.next()
    saved = rng.get_state()
    first = [rng.next_int(0, 99) for _ in range(5)]
    rng.set_state(saved)
    assert [rng.next_int(0, 99) for _ in range(5)] == first


def test_queued_random_replays_values_in_order():
    rng = QueuedRandom([3, 0.25, 1, 0, 2])
    assert rng.next_int(0, 10) == 3
    assert rng.next() == 0.25
    assert rng.chance(0.01) is True
    assert rng.chance(0.99) is False
    assert rng.pick_random(["a", "b", "c"]) == "c"
    with pytest.raises(IndexError):
        rng.next()


def test_queued_random_state_and_reset():
    rng = QueuedRandom([1, 2, 3])
    rng.next_int(0, 5)
    saved = rng.get_state()
    assert rng.next_int(0, 5) == 2
    rng.set_state(saved)
    assert rng.next_int(0, 5) == 2
    rng.set_values([9])
    assert rng.next_int(0, 10) == 9
