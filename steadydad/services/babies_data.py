"""Baby profile, event log, and milestone persistence on the key-value store."""

import json
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from steadydad.core.constants import STORAGE_KEYS
from steadydad.core.utils import now_ms
from steadydad.db.models import SLEEP_EVENT_TYPES, BabyEvent, BabyProfile, EventType, Milestone
from steadydad.services.kv_store import KeyValueStore
from steadydad.utils.age import normalize_birth_date_input

logger = logging.getLogger(__name__)


def _generate_id() -> str:
    return str(uuid.uuid4())


class BabyDataManager:
    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store or KeyValueStore()

    async def _load_list(self, key: str) -> List[Dict[str, Any]]:
        raw = await self.store.get_item(key)
        return json.loads(raw) if raw else []

    async def _save_list(self, key: str, items: List[Dict[str, Any]]) -> None:
        await self.store.set_item(key, json.dumps(items))

    # Used by: caregiving_session.py (save_profile)
    async def save_baby_profile(self, name: str, birth_date: str) -> BabyProfile:
        """Raises ValueError if the birth date can't be parsed."""
        normalized = normalize_birth_date_input(birth_date)
        if not normalized:
            raise ValueError("Invalid birth date")

        profile = BabyProfile(
            id=_generate_id(),
            name=name,
            birth_date=normalized,
            created_at=now_ms(),
        )
        await self.store.set_item(STORAGE_KEYS["BABY_PROFILE"], profile.model_dump_json())
        logger.info(f"Saved baby profile {profile.id}")
        return profile

    # Used by: caregiving_session.py (load_initial_data), update_baby_profile(), export_all_data()
    async def get_baby_profile(self) -> Optional[BabyProfile]:
        raw = await self.store.get_item(STORAGE_KEYS["BABY_PROFILE"])
        return BabyProfile.model_validate_json(raw) if raw else None

    # Used by: caregiving_session.py (update_profile)
    async def update_baby_profile(self, updates: Dict[str, Any]) -> Optional[BabyProfile]:
        """Returns None when no profile exists. Raises ValueError on an invalid birth date."""
        existing = await self.get_baby_profile()
        if existing is None:
            return None

        normalized_updates = {k: v for k, v in updates.items() if k in ("name", "birth_date")}
        if isinstance(updates.get("birth_date"), str):
            normalized = normalize_birth_date_input(updates["birth_date"])
            if not normalized:
                raise ValueError("Invalid birth date")
            normalized_updates["birth_date"] = normalized

        updated = existing.model_copy(update=normalized_updates)
        await self.store.set_item(STORAGE_KEYS["BABY_PROFILE"], updated.model_dump_json())
        return updated

    # Used by: caregiving_session.py (log_event)
    async def add_event(
            self,
            baby_id: str,
            event_type: EventType,
            timestamp: int,
            metadata_json: str = "{}",
    ) -> BabyEvent:
        """Stored newest-insert first; readers must not assume chronological order."""
        event = BabyEvent(
            id=_generate_id(),
            baby_id=baby_id,
            type=event_type,
            timestamp=timestamp,
            metadata_json=metadata_json,
        )
        events = await self._load_list(STORAGE_KEYS["EVENTS"])
        events.insert(0, event.model_dump(mode="json"))
        await self._save_list(STORAGE_KEYS["EVENTS"], events)
        logger.info(f"Logged {event.type.value} event {event.id} for baby {baby_id}")
        return event

    # Used by: caregiving_session.py (load_initial_data, refresh_events)
    async def get_events(self, baby_id: str, limit: Optional[int] = 200) -> List[BabyEvent]:
        events = [
            BabyEvent(**row)
            for row in await self._load_list(STORAGE_KEYS["EVENTS"])
            if row.get("baby_id") == baby_id
        ]
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit] if limit is not None else events

    # Used by: api/events.py (GET /events/last/{event_type})
    async def get_last_event_by_type(self, baby_id: str, event_type: EventType) -> Optional[BabyEvent]:
        matching = [e for e in await self.get_events(baby_id, limit=None) if e.type == event_type]
        return matching[0] if matching else None

    async def get_last_sleep_event(self, baby_id: str) -> Optional[BabyEvent]:
        matching = [e for e in await self.get_events(baby_id, limit=None) if e.type in SLEEP_EVENT_TYPES]
        return matching[0] if matching else None

    # Used by: caregiving_session.py (add_milestone)
    async def add_milestone(
            self,
            baby_id: str,
            title: str,
            timestamp: int,
            note: Optional[str] = None,
            photo_uri: Optional[str] = None,
    ) -> Milestone:
        milestone = Milestone(
            id=_generate_id(),
            baby_id=baby_id,
            title=title,
            timestamp=timestamp,
            note=note,
            photo_uri=photo_uri,
        )
        milestones = await self._load_list(STORAGE_KEYS["MILESTONES"])
        milestones.insert(0, milestone.model_dump(mode="json"))
        await self._save_list(STORAGE_KEYS["MILESTONES"], milestones)
        return milestone

    # Used by: caregiving_session.py (load_initial_data, refresh_milestones)
    async def get_milestones(self, baby_id: str) -> List[Milestone]:
        milestones = [
            Milestone(**row)
            for row in await self._load_list(STORAGE_KEYS["MILESTONES"])
            if row.get("baby_id") == baby_id
        ]
        milestones.sort(key=lambda m: m.timestamp, reverse=True)
        return milestones

    # Used by: api/events.py (POST /guidance/{guidance_id}/viewed)
    async def mark_guidance_viewed(self, guidance_id: str) -> None:
        viewed = await self._load_list(STORAGE_KEYS["GUIDANCE_VIEWED"])
        if guidance_id not in viewed:
            viewed.append(guidance_id)
            await self._save_list(STORAGE_KEYS["GUIDANCE_VIEWED"], viewed)

    async def get_viewed_guidance_ids(self) -> List[str]:
        return await self._load_list(STORAGE_KEYS["GUIDANCE_VIEWED"])

    # Used by: caregiving_session.py (complete_onboarding)
    async def set_onboarding_done(self) -> None:
        await self.store.set_item(STORAGE_KEYS["ONBOARDING_DONE"], "true")

    # Used by: caregiving_session.py (load_initial_data)
    async def is_onboarding_done(self) -> bool:
        return await self.store.get_item(STORAGE_KEYS["ONBOARDING_DONE"]) == "true"

    # Used by: api/endpoints.py (PUT /dad-goals)
    async def save_dad_goals(self, goals: List[str]) -> None:
        await self._save_list(STORAGE_KEYS["DAD_GOALS"], goals)

    async def get_dad_goals(self) -> List[str]:
        return await self._load_list(STORAGE_KEYS["DAD_GOALS"])

    # Used by: api/endpoints.py (GET /export)
    async def export_all_data(self) -> Dict[str, Any]:
        profile = await self.get_baby_profile()
        return {
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "profile": profile.model_dump(mode="json") if profile else None,
            "events": await self._load_list(STORAGE_KEYS["EVENTS"]),
            "milestones": await self._load_list(STORAGE_KEYS["MILESTONES"]),
            "guidance_viewed": await self.get_viewed_guidance_ids(),
            "dad_goals": await self.get_dad_goals(),
        }

    # Used by: caregiving_session.py (reset_all)
    async def reset_all_data(self) -> None:
        await self.store.multi_remove(STORAGE_KEYS.values())
        logger.info("All stored caregiving data removed")
