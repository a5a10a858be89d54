"""Home-screen dashboard widget adapter."""

import logging

from steadydad.core.constants import DASHBOARD_DEEP_LINK, DASHBOARD_WIDGET_ID
from steadydad.services.dashboard_snapshot import DashboardSnapshot
from steadydad.services.glanceable_client import WidgetPrimitives
from steadydad.services.glanceable_content import build_dashboard_widget_content

logger = logging.getLogger(__name__)


class DashboardWidget:
    def __init__(self, primitives: WidgetPrimitives, widget_id: str = DASHBOARD_WIDGET_ID):
        self.primitives = primitives
        self.widget_id = widget_id

    # Used by: glanceable_sync.py (sync)
    async def update(self, snapshot: DashboardSnapshot) -> None:
        await self.primitives.update_widget(
            self.widget_id,
            build_dashboard_widget_content(snapshot),
            deep_link_url=DASHBOARD_DEEP_LINK,
        )
        logger.debug(f"Updated widget {self.widget_id}")

    # Used by: glanceable_sync.py (clear)
    async def clear(self) -> None:
        await self.primitives.clear_widget(self.widget_id)

    # Used by: api/glanceables.py (GET /glanceables/status)
    async def is_active(self) -> bool:
        widgets = await self.primitives.get_active_widgets()
        return any(widget.get("name") == self.widget_id for widget in widgets)
