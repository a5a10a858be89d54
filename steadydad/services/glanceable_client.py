"""HTTP client for the on-device glanceables bridge (live activities + home-screen widgets)."""

import aiohttp
import json
import logging
from typing import Protocol, Optional, Dict, Any, List

logger = logging.getLogger(__name__)


class GlanceableBridgeError(Exception):
    """Raised when the bridge rejects or fails a live activity / widget call."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# Used by: live_activity.py (type hint), tests/conftest.py (fake implementation)
class LiveActivityPrimitives(Protocol):
    async def start_live_activity(
        self, content: Dict[str, Any], activity_name: str, deep_link_url: str
    ) -> Optional[str]:
        """Returns the id the OS assigned to the new activity."""
        ...

    async def update_live_activity(self, activity_id: str, content: Dict[str, Any]) -> None:
        ...

    async def stop_live_activity(self, activity_id: str, dismissal_policy: str) -> None:
        ...

    async def end_all_live_activities(self, dismissal_policy: str) -> None:
        ...

    async def is_live_activity_active(self, activity_name: str) -> bool:
        ...


# Used by: widget.py (type hint), tests/conftest.py (fake implementation)
class WidgetPrimitives(Protocol):
    async def update_widget(self, widget_id: str, content: Dict[str, Any], deep_link_url: str) -> None:
        ...

    async def clear_widget(self, widget_id: str) -> None:
        ...

    async def get_active_widgets(self) -> List[Dict[str, Any]]:
        ...


# Used by: glanceable_sync.py (get_glanceable_sync_controller)
class HttpGlanceableBridge:
    """Implements both primitive protocols against the bridge's REST endpoints."""

    def __init__(self, base_url: str, timeout_seconds: int = 0):
        self.base_url = base_url.rstrip("/")
        # 0 means no deadline
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds or None)

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = self.base_url + path
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(method, url, json=payload) as response:
                    body = await response.text()
                    if response.status >= 400:
                        raise GlanceableBridgeError(
                            f"{method} {path} failed with status {response.status}: {body}",
                            status=response.status,
                        )
                    if not body:
                        return {}
                    data = json.loads(body)
                    logger.debug(f"{method} {path} -> {data}")
                    return data or {}
        except (aiohttp.ClientError, ValueError) as e:
            raise GlanceableBridgeError(f"{method} {path} failed: {e}") from e

    async def start_live_activity(
        self, content: Dict[str, Any], activity_name: str, deep_link_url: str
    ) -> Optional[str]:
        data = await self._request(
            "POST",
            "/live-activities",
            {"activity_name": activity_name, "deep_link_url": deep_link_url, "content": content},
        )
        return data.get("activity_id")

    async def update_live_activity(self, activity_id: str, content: Dict[str, Any]) -> None:
        await self._request("PUT", f"/live-activities/{activity_id}", {"content": content})

    async def stop_live_activity(self, activity_id: str, dismissal_policy: str) -> None:
        await self._request(
            "POST",
            f"/live-activities/{activity_id}/stop",
            {"dismissal_policy": dismissal_policy},
        )

    async def end_all_live_activities(self, dismissal_policy: str) -> None:
        await self._request("POST", "/live-activities/stop-all", {"dismissal_policy": dismissal_policy})

    async def is_live_activity_active(self, activity_name: str) -> bool:
        try:
            data = await self._request("GET", f"/live-activities/{activity_name}/active")
        except GlanceableBridgeError as e:
            logger.warning(f"Could not check live activity {activity_name}: {e}")
            return False
        return bool(data.get("active"))

    async def update_widget(self, widget_id: str, content: Dict[str, Any], deep_link_url: str) -> None:
        await self._request(
            "PUT",
            f"/widgets/{widget_id}",
            {"content": content, "deep_link_url": deep_link_url},
        )

    async def clear_widget(self, widget_id: str) -> None:
        await self._request("DELETE", f"/widgets/{widget_id}")

    async def get_active_widgets(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/widgets")
        return data.get("widgets", [])
