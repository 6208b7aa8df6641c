from utils.cache import OptionCache
from utils.states import CacheKey, FLOW_KEYS, State


def test_get_returns_value_before_ttl(cache, clock):
    cache.set(1, CacheKey.SERIES_LIST, ["a"])
    clock.advance(119)
    assert cache.get(1, CacheKey.SERIES_LIST) == ["a"]


def test_entry_gone_after_ttl(cache, clock):
    cache.set(1, CacheKey.SERIES_LIST, ["a"])
    clock.advance(120)
    assert cache.get(1, CacheKey.SERIES_LIST) is None
    assert not cache.has(1, CacheKey.SERIES_LIST)


def test_reads_do_not_extend_life(cache, clock):
    cache.set(1, CacheKey.STATE, State.SERIES)
    for _ in range(11):
        clock.advance(10)
        assert cache.get(1, CacheKey.STATE) == State.SERIES
    clock.advance(10)
    assert cache.get(1, CacheKey.STATE) is None


def test_set_again_supersedes_value_and_deadline(cache, clock):
    cache.set(1, CacheKey.SERIES_LIST, ["old"])
    clock.advance(100)
    cache.set(1, CacheKey.SERIES_LIST, ["new"])
    clock.advance(100)
    assert cache.get(1, CacheKey.SERIES_LIST) == ["new"]


def test_missing_key_returns_default():
    c = OptionCache()
    assert c.get(42, CacheKey.FOLDER_ID) is None
    assert c.get(42, CacheKey.FOLDER_ID, "nope") == "nope"


def test_keys_are_per_user(cache):
    cache.set(1, CacheKey.SERIES_ID, 1)
    cache.set(11, CacheKey.SERIES_ID, 2)
    assert cache.get(1, CacheKey.SERIES_ID) == 1
    assert cache.get(11, CacheKey.SERIES_ID) == 2


def test_falsy_values_are_present(cache):
    cache.set(1, CacheKey.SERIES_LIST, [])
    assert cache.has(1, CacheKey.SERIES_LIST)


def test_clear_only_touches_one_user(cache):
    for key in (CacheKey.STATE, CacheKey.SERIES_LIST, CacheKey.REVOKE_TARGET):
        cache.set(1, key, "x")
        cache.set(2, key, "y")

    cache.clear(1, FLOW_KEYS)

    assert all(cache.get(1, k) is None for k in FLOW_KEYS)
    assert cache.get(2, CacheKey.STATE) == "y"


def test_clear_without_keys_drops_everything_for_user(cache):
    cache.set(1, CacheKey.STATE, State.PROFILE)
    cache.set(1, CacheKey.PROFILE_LIST, [])
    cache.clear(1)
    assert len(cache) == 0


def test_sweep_removes_expired_entries(cache, clock):
    cache.set(1, CacheKey.STATE, State.SERIES)
    clock.advance(60)
    cache.set(2, CacheKey.STATE, State.SERIES)
    clock.advance(70)

    assert cache.sweep() == 1
    assert len(cache) == 1
    assert cache.get(2, CacheKey.STATE) == State.SERIES


def test_lapsed_after_expiry_only(cache, clock):
    cache.set(1, CacheKey.STATE, State.PROFILE)
    assert not cache.lapsed(1, CacheKey.STATE)

    clock.advance(121)
    assert cache.lapsed(1, CacheKey.STATE)

    # tombstones last one more ttl
    clock.advance(120)
    assert not cache.lapsed(1, CacheKey.STATE)


def test_delete_is_not_lapse(cache, clock):
    cache.set(1, CacheKey.STATE, State.PROFILE)
    cache.delete(1, CacheKey.STATE)
    clock.advance(121)
    assert not cache.lapsed(1, CacheKey.STATE)


def test_sweep_drops_old_tombstones(cache, clock):
    cache.set(1, CacheKey.STATE, State.PROFILE)
    clock.advance(121)
    cache.sweep()
    assert cache.lapsed(1, CacheKey.STATE)
    clock.advance(120)
    cache.sweep()
    assert cache._lapsed == {}
