"""
Landing page configuration: built-in defaults, effective-config merge and
theme context.

The stored document on a workspace may omit any section. Merging is
section-granular: a stored section, even a partial one, replaces the whole
default section. Only ``sections_enabled`` controls which sections render.
"""
import copy
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

SECTION_KEYS = ("hero", "about", "how_it_works", "testimonials", "pricing", "cta")

# Document keys that hold a section body (``pricing`` renders from ``pricing_display``)
CONFIG_SECTIONS = ("hero", "about", "how_it_works", "testimonials", "pricing_display", "theme")

DEFAULT_PRIMARY_COLOR = "#3B82F6"
DEFAULT_SECONDARY_COLOR = "#8B5CF6"

DEFAULT_TESTIMONIALS_DISPLAY = {
    "layout": "slider",
    "max_visible": 3,
    "rotation_enabled": True,
}

DEFAULT_PRICING_DISPLAY = {
    "layout_style": "cards",
    "show_comparison": False,
}

DEFAULT_THEME = {
    "primary_color": DEFAULT_PRIMARY_COLOR,
    "secondary_color": DEFAULT_SECONDARY_COLOR,
    "font_pairing": "inter",
    "button_style": "rounded",
}

_DEFAULT_CONFIG: Dict[str, Any] = {
    "hero": {
        "headline": "Transform Your Life",
        "subheadline": "Elite coaching for high performers ready to level up",
        "cta_primary_text": "Start Your Journey",
        "cta_secondary_text": "Learn More",
        "background_style": "gradient",
    },
    "about": {
        "title": "About Your Coach",
        "description": "Experience transformation through proven coaching methodologies.",
        "bullet_points": [
            "Personalized coaching plans",
            "Weekly 1:1 sessions",
            "Progress tracking and accountability",
        ],
        "image_placement": "right",
    },
    "how_it_works": {
        "title": "How It Works",
        "steps": [
            {
                "title": "Book Your Call",
                "description": "Schedule a discovery session to discuss your goals",
                "icon_name": "Calendar",
            },
            {
                "title": "Get Your Plan",
                "description": "Receive a personalized coaching roadmap",
                "icon_name": "BookOpen",
            },
            {
                "title": "Transform",
                "description": "Execute with guidance and accountability",
                "icon_name": "TrendingUp",
            },
        ],
    },
    "testimonials": DEFAULT_TESTIMONIALS_DISPLAY,
    "pricing_display": DEFAULT_PRICING_DISPLAY,
    "theme": DEFAULT_THEME,
    "sections_enabled": list(SECTION_KEYS),
}


def default_landing_page_config() -> Dict[str, Any]:
    """Fresh copy of the built-in document, safe to mutate."""
    return copy.deepcopy(_DEFAULT_CONFIG)


def merge_config(
    stored: Optional[Dict[str, Any]],
    defaults: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Compute the effective configuration used for rendering.

    A section present in ``stored`` wins as a whole; keys missing inside it are
    NOT backfilled from ``defaults``. Absent (or null) sections fall back to the
    full default section. ``sections_enabled`` falls back to the canonical order.
    """
    stored = stored or {}
    if defaults is None:
        defaults = _DEFAULT_CONFIG

    effective: Dict[str, Any] = {}
    for key in CONFIG_SECTIONS:
        section = stored.get(key)
        if section is not None:
            effective[key] = copy.deepcopy(section)
        elif defaults.get(key) is not None:
            effective[key] = copy.deepcopy(defaults[key])

    sections_enabled = stored.get("sections_enabled")
    if sections_enabled is None:
        sections_enabled = defaults.get("sections_enabled") or list(SECTION_KEYS)
    effective["sections_enabled"] = list(sections_enabled)

    if stored.get("override_fields"):
        effective["override_fields"] = dict(stored["override_fields"])
    return effective


@dataclass(frozen=True)
class ThemeContext:
    """Theme values handed to the presentation layer as data."""
    primary_color: str
    secondary_color: str
    font_pairing: str = "inter"
    button_style: str = "rounded"

    def css_variables(self) -> Dict[str, str]:
        return {
            "--workspace-primary": self.primary_color,
            "--workspace-secondary": self.secondary_color,
        }

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["css_variables"] = self.css_variables()
        return data


DEFAULT_THEME_CONTEXT = ThemeContext(
    primary_color=DEFAULT_PRIMARY_COLOR,
    secondary_color=DEFAULT_SECONDARY_COLOR,
)


def resolve_theme(workspace: Any) -> ThemeContext:
    """Workspace branding colors, overridden by colors stored in the config theme."""
    if workspace is None:
        return DEFAULT_THEME_CONTEXT

    theme = (workspace.landing_page_config or {}).get("theme") or {}

    return ThemeContext(
        primary_color=theme.get("primary_color") or workspace.primary_color or DEFAULT_PRIMARY_COLOR,
        secondary_color=theme.get("secondary_color") or workspace.secondary_color or DEFAULT_SECONDARY_COLOR,
        font_pairing=theme.get("font_pairing") or "inter",
        button_style=theme.get("button_style") or "rounded",
    )
