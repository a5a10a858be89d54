from __future__ import annotations

import pytest

from conftest import make_event, make_profile

from steadydad.core.constants import SLEEP_ACTIVITY_ID_KEY, SLEEP_LIVE_ACTIVITY_NAME
from steadydad.services.dashboard_snapshot import build_dashboard_snapshot
from steadydad.services.glanceable_client import GlanceableBridgeError
from steadydad.services.live_activity import ActivityHandleStore


def _sleeping_snapshot():
    return build_dashboard_snapshot(make_profile(), [make_event("sleep_start", 1_000)], lambda _: "1 week old")


@pytest.mark.asyncio
async def test_start_persists_activity_id(live_activity, bridge, kv_store) -> None:
    activity_id = await live_activity.start(_sleeping_snapshot())

    assert activity_id == "activity-1"
    assert await kv_store.get_item(SLEEP_ACTIVITY_ID_KEY) == "activity-1"
    _, args = bridge.calls[-1]
    assert args[1] == SLEEP_LIVE_ACTIVITY_NAME


@pytest.mark.asyncio
async def test_failed_start_leaves_handle_absent(live_activity, bridge, handle_store) -> None:
    bridge.fail.add("start_live_activity")

    with pytest.raises(GlanceableBridgeError):
        await live_activity.start(_sleeping_snapshot())

    assert await handle_store.get() is None


@pytest.mark.asyncio
async def test_update_or_start_starts_when_nothing_running(live_activity, bridge, handle_store) -> None:
    await live_activity.update_or_start(_sleeping_snapshot())

    assert bridge.count("start_live_activity") == 1
    assert bridge.count("update_live_activity") == 0
    assert await handle_store.get() == "activity-1"


@pytest.mark.asyncio
async def test_update_or_start_updates_persisted_handle(live_activity, bridge) -> None:
    await live_activity.update_or_start(_sleeping_snapshot())
    await live_activity.update_or_start(_sleeping_snapshot())

    assert bridge.count("start_live_activity") == 1
    assert bridge.count("update_live_activity") == 1
    _, args = [c for c in bridge.calls if c[0] == "update_live_activity"][0]
    assert args[0] == "activity-1"


@pytest.mark.asyncio
async def test_update_uses_activity_name_when_running_without_handle(live_activity, bridge) -> None:
    bridge.running_names.add(SLEEP_LIVE_ACTIVITY_NAME)

    await live_activity.update_or_start(_sleeping_snapshot())

    assert bridge.count("start_live_activity") == 0
    _, args = [c for c in bridge.calls if c[0] == "update_live_activity"][0]
    assert args[0] == SLEEP_LIVE_ACTIVITY_NAME


@pytest.mark.asyncio
async def test_failed_update_clears_handle_and_restarts_once(live_activity, bridge, handle_store) -> None:
    await handle_store.set("stale-id")

    await live_activity.update_or_start(_sleeping_snapshot())

    assert bridge.count("update_live_activity") == 1
    assert bridge.count("start_live_activity") == 1
    assert await handle_store.get() == "activity-1"


@pytest.mark.asyncio
async def test_failed_restart_still_clears_stale_handle(live_activity, bridge, handle_store, kv_store) -> None:
    await handle_store.set("stale-id")
    bridge.fail.add("start_live_activity")

    with pytest.raises(GlanceableBridgeError):
        await live_activity.update_or_start(_sleeping_snapshot())

    assert await handle_store.get() is None
    assert await kv_store.get_item(SLEEP_ACTIVITY_ID_KEY) is None


@pytest.mark.asyncio
async def test_end_stops_persisted_id_and_clears_handle(live_activity, bridge, handle_store) -> None:
    await live_activity.start(_sleeping_snapshot())

    await live_activity.end(dismissal_policy="immediate")

    stopped = [args[0] for name, args in bridge.calls if name == "stop_live_activity"]
    assert stopped == ["activity-1", SLEEP_LIVE_ACTIVITY_NAME]
    assert bridge.count("end_all_live_activities") == 0
    assert bridge.activities == {}
    assert await handle_store.get() is None


@pytest.mark.asyncio
async def test_end_falls_back_to_stop_all_when_nothing_stops(live_activity, bridge, handle_store) -> None:
    await handle_store.set("gone-id")

    await live_activity.end(dismissal_policy="immediate")

    assert bridge.count("stop_live_activity") == 2
    assert bridge.count("end_all_live_activities") == 1
    assert await handle_store.get() is None


@pytest.mark.asyncio
async def test_end_clears_handle_even_when_stop_all_fails(live_activity, bridge, handle_store) -> None:
    await handle_store.set("gone-id")
    bridge.fail.add("end_all_live_activities")

    with pytest.raises(GlanceableBridgeError):
        await live_activity.end()

    assert await handle_store.get() is None


@pytest.mark.asyncio
async def test_handle_store_reads_persisted_value_once(kv_store) -> None:
    await kv_store.set_item(SLEEP_ACTIVITY_ID_KEY, "from-disk")
    store = ActivityHandleStore(kv_store)

    assert await store.get() == "from-disk"
    await kv_store.set_item(SLEEP_ACTIVITY_ID_KEY, "changed-behind-our-back")
    assert await store.get() == "from-disk"

    await store.remove()
    assert await store.get() is None
    assert await kv_store.get_item(SLEEP_ACTIVITY_ID_KEY) is None
