"""
Section composition for the public landing page.

``render_sections`` walks ``sections_enabled`` of the effective configuration
in stored order and emits one ``RenderedSection`` per visible section. Field
values fall back in a fixed chain: section config -> workspace branding ->
hardcoded default.
"""
import enum
import logging
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel

from blueprintos.services.landing_page import merge_config, resolve_theme

logger = logging.getLogger("blueprintos.renderer")

ROTATION_INTERVAL_SECONDS = 5

DEFAULT_HEADLINE = "Transform Your Life"
DEFAULT_SUBHEADLINE = "Elite coaching for high performers ready to level up"
DEFAULT_CTA_PRIMARY = "Get Started"
DEFAULT_CTA_SECONDARY = "Learn More"
DEFAULT_ABOUT_TITLE = "About Your Coach"
DEFAULT_ABOUT_DESCRIPTION = "Experience transformation through proven coaching methodologies."
DEFAULT_HOW_IT_WORKS_TITLE = "How It Works"
DEFAULT_CTA_HEADLINE = "Ready to Transform?"
DEFAULT_CTA_TEXT = "Your transformation starts with a single decision. Get started today."
CTA_BUTTON_TEXT = "Start Your Journey"
FEATURED_BADGE = "MOST POPULAR"


class StepIcon(str, enum.Enum):
    CALENDAR = "Calendar"
    BOOK_OPEN = "BookOpen"
    TRENDING_UP = "TrendingUp"
    TARGET = "Target"
    USERS = "Users"
    MESSAGE_CIRCLE = "MessageCircle"
    AWARD = "Award"
    HEART = "Heart"
    CHECK_CIRCLE = "CheckCircle"
    ZAP = "Zap"
    STAR = "Star"
    COMPASS = "Compass"
    CIRCLE = "Circle"


def step_icon(name: Optional[str]) -> StepIcon:
    try:
        return StepIcon(name)
    except ValueError:
        return StepIcon.CIRCLE


class RenderedSection(BaseModel):
    key: str
    props: Dict[str, Any]


# ═══════════════════════════════════════════
#  Testimonial rotation
# ═══════════════════════════════════════════

def rotation_active(layout: str, rotation_enabled: bool, count: int) -> bool:
    return layout == "slider" and rotation_enabled and count > 1


def next_rotation_index(index: int, count: int) -> int:
    """Index shown after one rotation tick; wraps to 0 after the last item."""
    if count <= 0:
        return 0
    return (index + 1) % count


# ═══════════════════════════════════════════
#  Section builders
# ═══════════════════════════════════════════

def _first(*values: Any) -> Any:
    for value in values:
        if value:
            return value
    return values[-1]


def _hero(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    hero = config.get("hero") or {}
    return {
        "brand_name": workspace.name,
        "logo_url": workspace.logo_url,
        "headline": _first(hero.get("headline"), DEFAULT_HEADLINE),
        "subheadline": _first(hero.get("subheadline"), workspace.tagline, DEFAULT_SUBHEADLINE),
        "cta_primary_text": _first(hero.get("cta_primary_text"), DEFAULT_CTA_PRIMARY),
        "cta_secondary_text": _first(hero.get("cta_secondary_text"), DEFAULT_CTA_SECONDARY),
        "background_style": hero.get("background_style") or "gradient",
        "hero_image_url": hero.get("hero_image_url"),
    }


def _about(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    about = config.get("about") or {}
    placement = about.get("image_placement") or "right"
    return {
        "title": _first(about.get("title"), DEFAULT_ABOUT_TITLE),
        "description": _first(about.get("description"), workspace.about_text, DEFAULT_ABOUT_DESCRIPTION),
        "bullet_points": list(about.get("bullet_points") or []),
        "image_placement": placement,
        "show_image": placement != "none",
        "image_first": placement == "left",
    }


def _how_it_works(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    section = config.get("how_it_works") or {}
    steps = []
    for number, step in enumerate(section.get("steps") or [], start=1):
        steps.append({
            "number": number,
            "title": step.get("title", ""),
            "description": step.get("description", ""),
            "icon": step_icon(step.get("icon_name")).value,
        })
    return {
        "title": _first(section.get("title"), DEFAULT_HOW_IT_WORKS_TITLE),
        "steps": steps,
    }


def _testimonials(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    display = config.get("testimonials") or {}
    layout = display.get("layout") or "slider"
    max_visible = display.get("max_visible") or 3
    rotation_enabled = display.get("rotation_enabled") is not False

    items = [
        {
            "client_name": t.client_name,
            "client_title": t.client_title,
            "testimonial_text": t.testimonial_text,
            "rating": t.rating or 5,
            "image_url": t.image_url,
        }
        for t in testimonials
    ]
    if layout != "slider":
        items = items[:max_visible]

    return {
        "title": "What Clients Say",
        "layout": layout,
        "max_visible": max_visible,
        "rotation_enabled": rotation_active(layout, rotation_enabled, len(items)),
        "rotation_interval_seconds": ROTATION_INTERVAL_SECONDS,
        "current_index": 0,
        "items": items,
    }


def _price(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _pricing(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    display = config.get("pricing_display") or {}
    highlight = display.get("highlight_tier")
    tiers = list(tiers)

    # a named highlight replaces the stored featured flag; never more than one
    chosen = next((t for t in tiers if highlight and t.name == highlight), None)
    if chosen is None:
        chosen = next((t for t in tiers if t.is_featured), None)

    items = []
    for tier in tiers:
        featured = tier is chosen
        items.append({
            "id": str(tier.id),
            "name": tier.name,
            "price": _price(tier.price),
            "currency": tier.currency,
            "duration_weeks": tier.duration_weeks,
            "features": list(tier.features or []),
            "is_featured": featured,
            "badge": FEATURED_BADGE if featured else None,
            "button_text": "Get Started" if featured else "Choose Plan",
        })

    return {
        "title": "Choose Your Path",
        "subtitle": "Investment in your transformation",
        "layout_style": display.get("layout_style") or "cards",
        "show_comparison": bool(display.get("show_comparison")),
        "tiers": items,
    }


def _cta(workspace, config: Dict[str, Any], tiers, testimonials) -> Dict[str, Any]:
    return {
        "headline": DEFAULT_CTA_HEADLINE,
        "text": _first(workspace.tagline, DEFAULT_CTA_TEXT),
        "button_text": CTA_BUTTON_TEXT,
    }


SectionBuilder = Callable[[Any, Dict[str, Any], Sequence[Any], Sequence[Any]], Dict[str, Any]]

SECTION_BUILDERS: Dict[str, SectionBuilder] = {
    "hero": _hero,
    "about": _about,
    "how_it_works": _how_it_works,
    "testimonials": _testimonials,
    "pricing": _pricing,
    "cta": _cta,
}


def _is_visible(key: str, config: Dict[str, Any], tiers: Sequence[Any], testimonials: Sequence[Any]) -> bool:
    if key == "testimonials":
        return len(testimonials) > 0
    if key == "pricing":
        return len(tiers) > 0
    if key in ("about", "how_it_works"):
        return config.get(key) is not None
    return True


def render_sections(
    workspace: Any,
    pricing_tiers: Sequence[Any],
    testimonials: Sequence[Any],
) -> List[RenderedSection]:
    """Ordered list of visible sections for a workspace.

    ``pricing_tiers`` must already be the active tiers in display order and
    ``testimonials`` the approved ones; this function does no storage access.
    """
    config = merge_config(workspace.landing_page_config)

    sections: List[RenderedSection] = []
    for key in config["sections_enabled"]:
        builder = SECTION_BUILDERS.get(key)
        if builder is None:
            logger.debug("Ignoring unknown section key %r for workspace %s", key, workspace.id)
            continue
        if not _is_visible(key, config, pricing_tiers, testimonials):
            continue
        sections.append(RenderedSection(key=key, props=builder(workspace, config, pricing_tiers, testimonials)))
    return sections


def build_landing_page(
    workspace: Optional[Any],
    pricing_tiers: Sequence[Any] = (),
    testimonials: Sequence[Any] = (),
) -> Dict[str, Any]:
    """Public page payload: workspace summary, theme context and sections.

    ``workspace=None`` (resolution miss) yields the generic payload with the
    default theme and no sections.
    """
    theme = resolve_theme(workspace)
    if workspace is None:
        return {"workspace": None, "theme": theme.as_dict(), "sections": [], "override_fields": {}}

    config = workspace.landing_page_config or {}
    return {
        "workspace": {
            "id": workspace.id,
            "name": workspace.name,
            "subdomain": workspace.subdomain,
            "custom_domain": workspace.custom_domain,
            "logo_url": workspace.logo_url,
            "tagline": workspace.tagline or "",
        },
        "theme": theme.as_dict(),
        "sections": [s.model_dump() for s in render_sections(workspace, pricing_tiers, testimonials)],
        "override_fields": dict(config.get("override_fields") or {}),
    }
