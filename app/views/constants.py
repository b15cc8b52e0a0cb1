"""
UI/view constants centralized for reuse across view modules.
"""

from __future__ import annotations

# Visible text
WINDOW_TITLE: str = "Family Photo Search"
SEARCH_PLACEHOLDER: str = "Search by name or caption"
SEARCH_BUTTON_TEXT: str = "Search"
NO_RESULTS_TEXT: str = "No photos found. Try a different name."
DEFAULT_ALT_TEXT: str = "Family photo"
DOWNLOAD_ACCESSIBLE_NAME: str = "Download photo"

# Dynamic properties mirrored for stylesheets and accessibility tools
PROP_EXPANDED: str = "expanded"
PROP_ACCESSIBILITY_HIDDEN: str = "accessibilityHidden"

# Grid defaults (overridable by settings.json)
DEFAULT_COLUMNS: int = 3
DEFAULT_THUMB_SIZE: int = 320
GRID_SPACING_PX: int = 12

SCROLL_ANIMATION_MS: int = 300
ERROR_BANNER_STYLE: str = "color: #b00020; font-weight: 700;"

# Log menu
LOG_MENU_TEXT: str = "Log"
OPEN_LATEST_LOG_TEXT: str = "Open Latest Log"
NO_LOG_MESSAGE: str = "No log file found"
