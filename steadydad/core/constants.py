"""Storage keys, glanceable identifiers, and app-level display constants."""

# ── KEY-VALUE STORAGE KEYS ──────────────────────────────────────────────────
# Key names are shared with the mobile client's local store so exports line up.
STORAGE_KEYS = {
    "BABY_PROFILE": "@steadydad_baby_profile",
    "EVENTS": "@steadydad_events",
    "MILESTONES": "@steadydad_milestones",
    "GUIDANCE": "@steadydad_guidance",
    "GUIDANCE_VIEWED": "@steadydad_guidance_viewed",
    "ONBOARDING_DONE": "@steadydad_onboarding_done",
    "DAD_GOALS": "@steadydad_dad_goals",
}

# Owned by the live activity tracker; cleared through GlanceableSyncController.clear(), not reset_all_data()
SLEEP_ACTIVITY_ID_KEY = "@steadydad_sleep_live_activity_id"


# ── GLANCEABLE IDENTIFIERS ──────────────────────────────────────────────────
GLANCEABLES_GROUP_IDENTIFIER = "group.com.steadydad.shared"

# Activity name doubles as the fallback id when no handle was persisted
SLEEP_LIVE_ACTIVITY_NAME = "sleep_tracking"
DASHBOARD_WIDGET_ID = "dashboard_snapshot"
DASHBOARD_DEEP_LINK = "/dashboard"

DISMISSAL_IMMEDIATE = "immediate"
DISMISSAL_DEFAULT = "default"

GLANCEABLES_SUPPORTED_PLATFORM = "ios"


# ── DISPLAY DEFAULTS ────────────────────────────────────────────────────────
DEFAULT_BABY_NAME = "Baby"

# Average Gregorian month, used for "N months old" labels
DAYS_PER_MONTH = 30.44
AGE_WEEKS_LABEL_LIMIT = 8
AGE_MONTHS_LABEL_LIMIT = 24

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000
