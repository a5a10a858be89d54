from __future__ import annotations

import random

from conftest import make_event, make_profile

from steadydad.services.dashboard_snapshot import (
    DashboardSnapshot,
    SleepStatus,
    build_dashboard_snapshot,
    get_dashboard_snapshot_sync_key,
)


def _age(_birth_date: str) -> str:
    return "2 weeks old"


def test_feed_and_diaper_without_sleep_events() -> None:
    events = [make_event("feed", 100), make_event("diaper", 50)]

    snapshot = build_dashboard_snapshot(make_profile(), events, _age)

    assert snapshot.last_feed_at == 100
    assert snapshot.last_diaper_at == 50
    assert snapshot.sleep_status == SleepStatus.NO_DATA
    assert snapshot.is_sleeping is False
    assert snapshot.last_sleep_at is None
    assert snapshot.sleep_started_at is None


def test_latest_sleep_start_means_sleeping_even_when_listed_first() -> None:
    events = [make_event("sleep_start", 200), make_event("sleep_end", 100)]

    snapshot = build_dashboard_snapshot(make_profile(), events, _age)

    assert snapshot.is_sleeping is True
    assert snapshot.sleep_started_at == 200
    assert snapshot.last_sleep_at == 200
    assert snapshot.sleep_status == SleepStatus.SLEEPING


def test_latest_sleep_end_means_awake() -> None:
    events = [make_event("sleep_start", 100), make_event("sleep_end", 200)]

    snapshot = build_dashboard_snapshot(make_profile(), events, _age)

    assert snapshot.is_sleeping is False
    assert snapshot.sleep_started_at is None
    assert snapshot.last_sleep_at == 200
    assert snapshot.sleep_status == SleepStatus.AWAKE


def test_no_profile_and_no_events_gives_placeholder() -> None:
    snapshot = build_dashboard_snapshot(None, [])

    assert snapshot.baby_name == "Baby"
    assert snapshot.baby_age_label is None
    assert snapshot.last_feed_at is None
    assert snapshot.last_diaper_at is None
    assert snapshot.last_sleep_at is None
    assert snapshot.sleep_started_at is None
    assert snapshot.sleep_status == SleepStatus.NO_DATA


def test_unnamed_profile_falls_back_to_placeholder_but_keeps_age() -> None:
    snapshot = build_dashboard_snapshot(make_profile(name=""), [], _age)

    assert snapshot.baby_name == "Baby"
    assert snapshot.baby_age_label == "2 weeks old"


def test_last_feed_is_max_timestamp_regardless_of_order() -> None:
    timestamps = [500, 20, 900, 300, 899]
    events = [make_event("feed", ts) for ts in timestamps] + [make_event("mood", 1000)]

    for _ in range(5):
        random.shuffle(events)
        snapshot = build_dashboard_snapshot(make_profile(), events, _age)
        assert snapshot.last_feed_at == 900


def test_metadata_is_never_inspected() -> None:
    events = [
        make_event("feed", 10, metadata_json="{not json"),
        make_event("sleep_start", 20, metadata_json=""),
    ]

    snapshot = build_dashboard_snapshot(make_profile(), events, _age)

    assert snapshot.last_feed_at == 10
    assert snapshot.is_sleeping is True


def test_duplicate_sleep_timestamps_break_ties_by_id() -> None:
    start = make_event("sleep_start", 100, event_id="b")
    end = make_event("sleep_end", 100, event_id="a")

    first = build_dashboard_snapshot(make_profile(), [start, end], _age)
    second = build_dashboard_snapshot(make_profile(), [end, start], _age)

    assert first == second
    assert first.is_sleeping is True


def test_sleep_invariants_hold_over_many_event_lists() -> None:
    rng = random.Random(7)
    for _ in range(50):
        events = [
            make_event(rng.choice(["sleep_start", "sleep_end", "feed"]), ts)
            for ts in rng.sample(range(1, 10_000), rng.randint(0, 12))
        ]
        snapshot = build_dashboard_snapshot(make_profile(), events, _age)

        sleep_events = [e for e in events if e.type in ("sleep_start", "sleep_end")]
        latest = max(sleep_events, key=lambda e: e.timestamp) if sleep_events else None

        assert snapshot.is_sleeping == (latest is not None and latest.type == "sleep_start")
        assert (snapshot.sleep_started_at is not None) == snapshot.is_sleeping
        assert (snapshot.sleep_status == SleepStatus.NO_DATA) == (latest is None)


def test_build_is_deterministic() -> None:
    events = [make_event("sleep_start", 5), make_event("feed", 3), make_event("diaper", 4)]

    assert build_dashboard_snapshot(make_profile(), events, _age) == build_dashboard_snapshot(
        make_profile(), list(events), _age
    )


def test_sync_key_equal_for_equal_snapshots() -> None:
    events = [make_event("feed", 100), make_event("sleep_end", 50)]
    a = build_dashboard_snapshot(make_profile(), events, _age)
    b = build_dashboard_snapshot(make_profile(), list(reversed(events)), _age)

    assert a is not b
    assert get_dashboard_snapshot_sync_key(a) == get_dashboard_snapshot_sync_key(b)


def test_sync_key_changes_when_any_field_changes() -> None:
    base = DashboardSnapshot(
        baby_name="Noa",
        baby_age_label="2 weeks old",
        last_feed_at=1,
        last_diaper_at=2,
        last_sleep_at=3,
        sleep_started_at=3,
        is_sleeping=True,
        sleep_status=SleepStatus.SLEEPING,
    )
    variants = [
        {"baby_name": "Ari"},
        {"baby_age_label": None},
        {"last_feed_at": 10},
        {"last_diaper_at": None},
        {"last_sleep_at": 4},
        {"sleep_started_at": None},
        {"is_sleeping": False},
        {"sleep_status": SleepStatus.AWAKE},
    ]
    base_key = get_dashboard_snapshot_sync_key(base)

    for change in variants:
        changed = DashboardSnapshot(**{**base.__dict__, **change})
        assert get_dashboard_snapshot_sync_key(changed) != base_key, change
