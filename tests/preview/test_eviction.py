from __future__ import annotations

import logging

from peekview.preview.cache import PreviewCache
from peekview.preview.eviction import EvictionPolicy


def _fill(host, cache, sizes):
    return [
        cache.get_or_render(host.add_file(f"file{index}.txt", b"x" * size))
        for index, size in enumerate(sizes)
    ]


def test_below_threshold_destroys_nothing(host, config):
    cache = PreviewCache(host, config)
    _fill(host, cache, [400_000, 400_000])

    assert EvictionPolicy(host, 1_024_000).reclaim(cache) is None
    assert host.destroyed == []


def test_over_threshold_destroys_oldest(host, config):
    cache = PreviewCache(host, config)
    first, second = _fill(host, cache, [550_000, 550_000])

    destroyed = EvictionPolicy(host, 1_024_000).reclaim(cache)

    assert destroyed is first
    assert host.destroyed == [first.content]
    assert list(cache.full_artifacts()) == [second]
    assert cache.managed_size() == 550_000


def test_at_most_one_destruction_per_pass(host, config):
    cache = PreviewCache(host, config)
    artifacts = _fill(host, cache, [500_000] * 5)
    policy = EvictionPolicy(host, 1_024_000)

    policy.reclaim(cache)
    assert host.destroyed == [artifacts[0].content]
    assert cache.managed_size() == 2_000_000

    policy.reclaim(cache)
    assert host.destroyed == [artifacts[0].content, artifacts[1].content]


def test_displayed_artifact_is_skipped(host, config):
    cache = PreviewCache(host, config)
    first, second = _fill(host, cache, [600_000, 600_000])

    destroyed = EvictionPolicy(host, 1_024_000).reclaim(cache, displayed=first)

    assert destroyed is second
    assert first.content.alive


def test_destroy_failure_is_logged_and_keeps_entry(host, config, caplog):
    cache = PreviewCache(host, config)
    first, _second = _fill(host, cache, [600_000, 600_000])
    host.undestroyable.add(first.path)

    with caplog.at_level(logging.WARNING, logger="peekview.preview.eviction"):
        destroyed = EvictionPolicy(host, 1_024_000).reclaim(cache)

    assert destroyed is None
    assert first.path in cache
    assert "unsaved changes" in caplog.text


def test_wipe_partial_spares_displayed(host, config):
    cache = PreviewCache(host, config)
    big = cache.get_or_render(host.add_file("big.bin", b"\x00" * 2_000_000))
    huge = cache.get_or_render(host.add_file("huge.bin", b"\x00" * 3_000_000))
    policy = EvictionPolicy(host, 1_024_000)

    assert policy.wipe_partial(cache, displayed=huge) == 1
    assert host.destroyed == [big.content]
    assert list(cache.partial_artifacts()) == [huge]

    assert policy.wipe_partial(cache) == 1
    assert list(cache.partial_artifacts()) == []


def test_partial_artifacts_do_not_count_toward_threshold(host, config):
    cache = PreviewCache(host, config)
    _fill(host, cache, [100])
    cache.get_or_render(host.add_file("big.bin", b"\x00" * 5_000_000))

    assert EvictionPolicy(host, 1_024).reclaim(cache) is None


def test_run_reclaims_and_wipes(host, config):
    cache = PreviewCache(host, config)
    first, second = _fill(host, cache, [600_000, 600_000])
    partial = cache.get_or_render(host.add_file("big.bin", b"\x00" * 2_000_000))

    EvictionPolicy(host, 1_024_000).run(cache, displayed=second)

    assert host.destroyed == [first.content, partial.content]
    assert list(cache.full_artifacts()) == [second]
    assert len(cache) == 1


def test_overshoot_with_equal_entries_is_bounded_by_one_entry(host, config):
    cache = PreviewCache(host, config)
    policy = EvictionPolicy(host, 1_024_000)

    for index in range(12):
        artifact = cache.get_or_render(host.add_file(f"log{index}.txt", b"x" * 300_000))
        policy.run(cache, displayed=artifact)

        assert cache.managed_size() <= policy.threshold + artifact.size
        assert artifact.content.alive


def test_mixed_sizes_destroy_one_entry_per_pass(host, config):
    cache = PreviewCache(host, config)
    policy = EvictionPolicy(host, 1_000)
    small = _fill(host, cache, [100] * 9)

    for index in range(6):
        artifact = cache.get_or_render(host.add_file(f"large{index}.txt", b"x" * 500))
        destroyed_before = len(host.destroyed)
        policy.run(cache, displayed=artifact)
        assert len(host.destroyed) == destroyed_before + 1

    assert host.destroyed == [entry.content for entry in small[:6]]
    assert cache.managed_size() == 3_300
    assert cache.managed_size() > policy.threshold + 500
