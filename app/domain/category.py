"""
Category domain constants

Preset categories are shared by all users and cannot be modified/deleted.
Subscriptions without a category are grouped under UNCATEGORIZED_NAME.
"""

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_COLOR = "#6b7280"  # neutral gray

DEFAULT_CATEGORY_COLOR = "#6366f1"
DEFAULT_CATEGORY_ICON = "tag"

# (name, color, icon)
PRESET_CATEGORIES = [
    ("Streaming", "#ef4444", "tv"),
    ("Music", "#22c55e", "music"),
    ("Software", "#3b82f6", "code"),
    ("Cloud", "#06b6d4", "cloud"),
    ("Gaming", "#a855f7", "gamepad"),
    ("News", "#f59e0b", "newspaper"),
    ("Fitness", "#ec4899", "dumbbell"),
    ("Education", "#14b8a6", "graduation-cap"),
    ("Other", "#6b7280", "ellipsis"),
]


def resolve_category(name: str | None, color: str | None) -> tuple[str, str]:
    """(name, color) of a subscription's category, falling back to Uncategorized"""
    return name or UNCATEGORIZED_NAME, color or UNCATEGORIZED_COLOR
