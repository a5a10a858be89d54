from __future__ import annotations

import pytest

from steadydad.services import scheduler as scheduler_module
from steadydad.services.tasks import refresh_glanceables_task


@pytest.mark.asyncio
async def test_refresh_skipped_while_loading(session, bridge) -> None:
    result = await refresh_glanceables_task(session)

    assert result == {"refreshed": False, "reason": "loading"}
    assert bridge.calls == []


@pytest.mark.asyncio
async def test_refresh_skipped_when_disabled(session, bridge) -> None:
    await session.load_initial_data()
    session.glanceables.enabled_flag = "no"

    result = await refresh_glanceables_task(session)

    assert result["reason"] == "disabled"
    assert bridge.calls == []


@pytest.mark.asyncio
async def test_refresh_repushes_current_snapshot(session, bridge) -> None:
    await session.load_initial_data()
    await session.save_profile("Noa", "2026-10-01")
    await session.complete_onboarding()
    await session.wait_for_glanceables()

    result = await refresh_glanceables_task(session)

    assert result == {"refreshed": True, "failed": []}
    assert bridge.count("update_widget") == 2


@pytest.mark.asyncio
async def test_scheduler_not_started_when_refresh_disabled(monkeypatch) -> None:
    monkeypatch.setattr(scheduler_module.settings, "GLANCEABLES_REFRESH_MINUTES", 0)

    await scheduler_module.start_scheduler()

    assert scheduler_module.get_scheduler_status() == {"running": False, "jobs": []}


@pytest.mark.asyncio
async def test_refresh_without_active_profile_leaves_surfaces_alone(session, bridge) -> None:
    await session.load_initial_data()

    results = [await refresh_glanceables_task(session) for _ in range(3)]
    await session.save_profile("Noa", "2026-10-01")
    results.append(await refresh_glanceables_task(session))

    assert all(r == {"refreshed": False, "reason": "no_active_profile"} for r in results)
    assert bridge.count("clear_widget") == 0
    assert bridge.count("stop_live_activity") == 0
    assert bridge.count("end_all_live_activities") == 0
