"""
famfin Theme - Centralized color palette with semantic tokens.

Color Philosophy:
- Navy (#0A2647 / #144272) carries the brand: headers, primary buttons, active tabs
- Teal (#4ECDC4) always means money coming in, coral (#FF6B6B) money going out
- Slate grays for secondary text so amounts stay the loudest thing on screen
"""

# =============================================================================
# PRIMARY ACCENT COLORS
# =============================================================================
NAVY_DARK = "#0A2647"          # Header band
NAVY_PRIMARY = "#144272"       # Brand, active tab, primary buttons
BLUE_ACCENT = "#2196F3"        # Login icon, links
TEAL_PRIMARY = "#4ECDC4"       # Income
RED_PRIMARY = "#FF6B6B"        # Expense, errors
VIOLET_PRIMARY = "#6C63FF"     # Family member badge

# =============================================================================
# TEXT COLORS
# =============================================================================
TEXT_DARK = "#1E293B"
TEXT_MEDIUM = "#64748B"        # Secondary labels, inactive tabs
TEXT_ON_DARK = "#FFFFFF"

# =============================================================================
# BACKGROUND COLORS
# =============================================================================
BG_PAGE = "#F1F5F9"
BG_CARD = "#FFFFFF"
BG_INCOME_SOFT = "rgba(78, 205, 196, 0.1)"
BG_EXPENSE_SOFT = "rgba(255, 107, 107, 0.1)"
BG_MEMBER_SOFT = "rgba(108, 99, 255, 0.1)"
BG_ERROR = "rgba(255, 107, 107, 0.12)"

# =============================================================================
# BORDER COLORS
# =============================================================================
BORDER_LIGHT = "#E2E8F0"

# =============================================================================
# SEMANTIC UI TOKENS (change colors here only)
# =============================================================================
TEXT_TITLE = TEXT_ON_DARK             # Header band titles
TEXT_SECTION_HEADER = NAVY_PRIMARY    # Card headings
TEXT_LABEL = TEXT_MEDIUM              # Captions, dates
TEXT_VALUE = TEXT_DARK                # Descriptions, names
TEXT_ERROR = RED_PRIMARY              # Inline form errors

BUTTON_PRIMARY = NAVY_PRIMARY
BUTTON_DANGER = RED_PRIMARY

NAV_ACTIVE = NAVY_PRIMARY
NAV_INACTIVE = TEXT_MEDIUM


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================
def amount_color(transaction_type: str) -> str:
    """Teal for income, coral for anything else."""
    value = getattr(transaction_type, "value", transaction_type)
    return TEAL_PRIMARY if value == "income" else RED_PRIMARY


def amount_background(transaction_type: str) -> str:
    value = getattr(transaction_type, "value", transaction_type)
    return BG_INCOME_SOFT if value == "income" else BG_EXPENSE_SOFT


def role_colors(role: str) -> tuple[str, str]:
    """(foreground, background) of a member role badge."""
    if role == "owner":
        return TEAL_PRIMARY, BG_INCOME_SOFT
    return VIOLET_PRIMARY, BG_MEMBER_SOFT


def get_log_color(level: str) -> str:
    """Get the color for a log level."""
    colors = {
        "INFO": NAVY_PRIMARY,
        "SUCCESS": TEAL_PRIMARY,
        "WARNING": BLUE_ACCENT,
        "ERROR": RED_PRIMARY,
    }
    return colors.get(level.upper(), TEXT_MEDIUM)
