"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any business rule that references a numeric bound or a fixed display
string should import it from here instead of hardcoding.  This avoids
drift between apps that use the same value.
"""

# ── Assessment ──────────────────────────────────────────────────────
# Danger levels are integers in a closed range.  Anything outside is
# rejected before it reaches the database.
MIN_DANGER_LEVEL: int = 1
MAX_DANGER_LEVEL: int = 6

# Colour band per danger level, used by dashboards and badges.
DANGER_LEVEL_COLOURS: dict[int, str] = {
    1: "green",
    2: "green",
    3: "yellow",
    4: "yellow",
    5: "orange",
    6: "red",
}

# ── Password policy ─────────────────────────────────────────────────
PASSWORD_MIN_LENGTH: int = 7

# ── Role images ─────────────────────────────────────────────────────
ROLE_IMAGE_MAX_BYTES: int = 5 * 1024 * 1024
ROLE_IMAGE_CONTENT_TYPES: tuple[str, ...] = (
    "image/png",
    "image/jpeg",
    "image/webp",
)
ROLE_IMAGE_UPLOAD_DIR: str = "role_images"

# ── Identity disclosure ─────────────────────────────────────────────
UNKNOWN_DISPLAY_NAME: str = "Unknown"
UNKNOWN_DISPLAY_EMAIL: str = "unknown@hidden.com"

# ── Incident reporting ──────────────────────────────────────────────
AUTO_CREATED_PERSON_NOTE: str = "Auto-created from incident report"
