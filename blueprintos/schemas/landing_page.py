"""Landing page configuration schemas.

Every section field is optional: a stored section may be partially populated
and is still rendered as-is (no per-field backfill from defaults).
"""
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from blueprintos.services.landing_page import SECTION_KEYS


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore")


class HeroConfig(_Section):
    headline: Optional[str] = None
    subheadline: Optional[str] = None
    cta_primary_text: Optional[str] = None
    cta_secondary_text: Optional[str] = None
    background_style: Optional[str] = None
    hero_image_url: Optional[str] = None


class AboutConfig(_Section):
    title: Optional[str] = None
    description: Optional[str] = None
    bullet_points: Optional[List[str]] = None
    image_placement: Optional[Literal["left", "right", "none"]] = None


class HowItWorksStep(_Section):
    title: str
    description: str = ""
    icon_name: str = "Circle"


class HowItWorksConfig(_Section):
    title: Optional[str] = None
    steps: Optional[List[HowItWorksStep]] = None


class TestimonialsDisplayConfig(_Section):
    layout: Optional[Literal["slider", "grid", "single"]] = None
    max_visible: Optional[int] = Field(default=None, ge=1)
    rotation_enabled: Optional[bool] = None


class PricingDisplayConfig(_Section):
    layout_style: Optional[Literal["cards", "table", "simple"]] = None
    show_comparison: Optional[bool] = None
    highlight_tier: Optional[str] = None


class ThemeConfig(_Section):
    primary_color: Optional[str] = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    secondary_color: Optional[str] = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")
    font_pairing: Optional[str] = None
    button_style: Optional[str] = None


SECTION_MODELS = {
    "hero": HeroConfig,
    "about": AboutConfig,
    "how_it_works": HowItWorksConfig,
    "testimonials": TestimonialsDisplayConfig,
    "pricing_display": PricingDisplayConfig,
    "theme": ThemeConfig,
}


def clean_sections_enabled(keys: List[str]) -> List[str]:
    """Keep recognized section keys, first occurrence wins, order preserved."""
    cleaned: List[str] = []
    for key in keys:
        if key in SECTION_KEYS and key not in cleaned:
            cleaned.append(key)
    return cleaned


class LandingPageConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hero: Optional[HeroConfig] = None
    about: Optional[AboutConfig] = None
    how_it_works: Optional[HowItWorksConfig] = None
    testimonials: Optional[TestimonialsDisplayConfig] = None
    pricing_display: Optional[PricingDisplayConfig] = None
    theme: Optional[ThemeConfig] = None
    sections_enabled: List[str] = Field(default_factory=lambda: list(SECTION_KEYS))
    override_fields: Optional[Dict[str, str]] = None

    @field_validator("sections_enabled")
    @classmethod
    def _known_sections_only(cls, v: List[str]) -> List[str]:
        return clean_sections_enabled(v)

    def to_document(self) -> dict:
        """Stored JSON form: absent sections stay absent, unset fields are dropped."""
        return self.model_dump(exclude_none=True)


class GeneratedLandingPage(BaseModel):
    """Shape the completion API must return; anything else triggers the fallback."""
    model_config = ConfigDict(extra="ignore")

    hero: HeroConfig
    about: AboutConfig
    how_it_works: HowItWorksConfig
    sections_enabled: Optional[List[str]] = None

    @field_validator("sections_enabled")
    @classmethod
    def _known_sections_only(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        return clean_sections_enabled(v)


class GenerationRequest(BaseModel):
    prompt: str = ""
    niche: Optional[str] = None
    tone: Optional[str] = None
    save: bool = False


class PromptTemplate(BaseModel):
    niche: str
    template: str


class ToneOption(BaseModel):
    value: str
    label: str


class PromptTemplates(BaseModel):
    templates: List[PromptTemplate]
    tones: List[ToneOption]


class LandingPagePromptOut(BaseModel):
    id: str
    prompt_text: str
    generated_config: dict
    is_active: bool
    created_at: Optional[str] = None
