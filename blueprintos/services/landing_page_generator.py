import copy
import enum
import json
import logging
from typing import Any, Dict, Optional

import openai
from pydantic import ValidationError
from sqlalchemy.orm import Session

from blueprintos.config import settings
from blueprintos.middleware.metrics import record_generation
from blueprintos.models.landing_page_prompt import LandingPagePrompt
from blueprintos.models.workspace import Workspace
from blueprintos.schemas.landing_page import GeneratedLandingPage
from blueprintos.services.landing_page import (
    DEFAULT_PRICING_DISPLAY,
    DEFAULT_TESTIMONIALS_DISPLAY,
    DEFAULT_THEME,
    SECTION_KEYS,
)

logger = logging.getLogger("blueprintos.generator")


class CoachingNiche(str, enum.Enum):
    FITNESS = "fitness"
    BUSINESS = "business"
    MINDSET = "mindset"
    CAREER = "career"
    RELATIONSHIPS = "relationships"
    TRAUMA = "trauma"
    SPIRITUALITY = "spirituality"
    LIFE = "life"
    EXECUTIVE = "executive"
    HEALTH = "health"


PROMPT_TEMPLATES: Dict[CoachingNiche, str] = {
    CoachingNiche.FITNESS: "I help [target audience] achieve [fitness goals] through [training method]",
    CoachingNiche.BUSINESS: "I help [business owners/entrepreneurs] grow [revenue/scale] through [strategy]",
    CoachingNiche.MINDSET: "I help [professionals/individuals] overcome [limiting beliefs] through [transformation approach]",
    CoachingNiche.CAREER: "I help [professionals] transition to [career goals] through [method]",
    CoachingNiche.RELATIONSHIPS: "I help [couples/individuals] build [relationship outcome] through [coaching style]",
    CoachingNiche.TRAUMA: "I help [trauma survivors] heal from [specific trauma] through [healing modality]",
    CoachingNiche.SPIRITUALITY: "I help [seekers] connect with [spiritual goal] through [practice]",
    CoachingNiche.LIFE: "I help [demographic] navigate [life transition] through [coaching approach]",
    CoachingNiche.EXECUTIVE: "I help [executives/leaders] achieve [leadership goal] through [executive coaching method]",
    CoachingNiche.HEALTH: "I help [health-conscious individuals] improve [health outcome] through [wellness approach]",
}

TONE_OPTIONS = [
    {"value": "professional", "label": "Professional"},
    {"value": "motivational", "label": "Motivational"},
    {"value": "conversational", "label": "Conversational"},
    {"value": "clinical", "label": "Clinical"},
    {"value": "spiritual", "label": "Spiritual"},
    {"value": "empowering", "label": "Empowering"},
]

DEFAULT_TONE = "professional and motivational"
DEFAULT_NICHE_LABEL = "general coaching"

# Prompts longer than this become the about description (first 200 chars)
ABOUT_FROM_PROMPT_MIN_LENGTH = 50
ABOUT_FROM_PROMPT_MAX_CHARS = 200
GENERIC_ABOUT_DESCRIPTION = (
    "Experience transformation through proven coaching methodologies tailored to your unique goals."
)


def _hero(headline: str, subheadline: str, primary: str, secondary: str) -> Dict[str, str]:
    return {
        "headline": headline,
        "subheadline": subheadline,
        "cta_primary_text": primary,
        "cta_secondary_text": secondary,
        "background_style": "gradient",
    }


NICHE_HEROES: Dict[CoachingNiche, Dict[str, str]] = {
    CoachingNiche.FITNESS: _hero(
        "Transform Your Fitness Journey",
        "Achieve your goals with personalized training and expert guidance",
        "Start Training", "View Programs",
    ),
    CoachingNiche.BUSINESS: _hero(
        "Scale Your Business with Confidence",
        "Strategic coaching for entrepreneurs ready to break through plateaus",
        "Book Strategy Call", "Learn More",
    ),
    CoachingNiche.MINDSET: _hero(
        "Unlock Your Limitless Potential",
        "Transform limiting beliefs into unstoppable momentum",
        "Begin Transformation", "How It Works",
    ),
    CoachingNiche.CAREER: _hero(
        "Navigate Your Career Transition",
        "Expert guidance to land your dream role and advance your career",
        "Start Your Journey", "View Success Stories",
    ),
    CoachingNiche.RELATIONSHIPS: _hero(
        "Build Deeper Connections",
        "Transform your relationships through communication and understanding",
        "Get Started", "Learn Our Method",
    ),
    CoachingNiche.TRAUMA: _hero(
        "Healing Is Possible",
        "Compassionate, trauma-informed support for your healing journey",
        "Begin Healing", "About Our Approach",
    ),
    CoachingNiche.SPIRITUALITY: _hero(
        "Awaken Your Spiritual Path",
        "Discover deeper meaning and connection in your life",
        "Start Your Practice", "Explore",
    ),
    CoachingNiche.LIFE: _hero(
        "Navigate Life's Transitions",
        "Expert coaching for the moments that matter most",
        "Book Your Session", "Learn More",
    ),
    CoachingNiche.EXECUTIVE: _hero(
        "Lead with Impact",
        "Executive coaching for leaders driving organizational transformation",
        "Schedule Consultation", "Our Approach",
    ),
    CoachingNiche.HEALTH: _hero(
        "Optimize Your Wellbeing",
        "Holistic health coaching for sustainable lifestyle transformation",
        "Start Your Plan", "View Programs",
    ),
}


def parse_niche(niche: Optional[str]) -> Optional[CoachingNiche]:
    """Map a free-form niche value onto a known niche, or None."""
    if not niche:
        return None
    try:
        return CoachingNiche(str(niche).strip().lower())
    except ValueError:
        return None


def _fixed_sections() -> Dict[str, Any]:
    """Sections never requested from the completion API."""
    return {
        "testimonials": copy.deepcopy(DEFAULT_TESTIMONIALS_DISPLAY),
        "pricing_display": copy.deepcopy(DEFAULT_PRICING_DISPLAY),
        "theme": copy.deepcopy(DEFAULT_THEME),
    }


def build_fallback_config(prompt: str, niche: Optional[str] = None) -> Dict[str, Any]:
    """Deterministic configuration used whenever the completion API is unusable.

    Only ``hero`` depends on the niche; ``about.description`` is the first 200
    characters of the prompt when the prompt is longer than 50 characters.
    """
    prompt = prompt or ""
    if len(prompt) > ABOUT_FROM_PROMPT_MIN_LENGTH:
        description = prompt[:ABOUT_FROM_PROMPT_MAX_CHARS]
    else:
        description = GENERIC_ABOUT_DESCRIPTION

    config: Dict[str, Any] = {
        "hero": _hero(
            "Transform Your Life",
            "Elite coaching for high performers ready to level up",
            "Get Started", "Learn More",
        ),
        "about": {
            "title": "About Your Coach",
            "description": description,
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
                    "description": "Schedule a discovery session to discuss your goals and challenges",
                    "icon_name": "Calendar",
                },
                {
                    "title": "Get Your Plan",
                    "description": "Receive a personalized coaching roadmap designed for you",
                    "icon_name": "BookOpen",
                },
                {
                    "title": "Transform",
                    "description": "Execute with guidance, support, and accountability",
                    "icon_name": "TrendingUp",
                },
            ],
        },
        **_fixed_sections(),
        "sections_enabled": list(SECTION_KEYS),
        "override_fields": {},
    }

    known = parse_niche(niche)
    if known is not None:
        config["hero"] = dict(NICHE_HEROES[known])
    return config


class LandingPageGenerator:
    """
    Landing page copy generator.

    Makes one chat-completion call constrained to JSON output. Missing API key,
    API errors and replies that do not match the expected shape all end in the
    deterministic fallback; ``generate`` never raises.
    """

    SYSTEM_PROMPT = """You are an expert landing page copywriter specializing in coaching businesses.
Convert the user's coaching description into a structured landing page configuration.

Extract:
1. A compelling headline (5-10 words, benefit-focused)
2. A subheadline (15-25 words, explaining the transformation)
3. Primary CTA text (2-4 words, action-oriented)
4. Secondary CTA text (2-4 words)
5. About section (title, 2-3 sentence description, 3 bullet points)
6. How it works (3 steps with titles and descriptions)
7. Suggest appropriate icon names (Calendar, BookOpen, TrendingUp, Target, Users, MessageCircle, Award, Heart, CheckCircle, Zap, Star, Compass)

Tone: {tone}
Niche: {niche}

Return valid JSON matching this structure:
{{
  "hero": {{
    "headline": "string",
    "subheadline": "string",
    "cta_primary_text": "string",
    "cta_secondary_text": "string",
    "background_style": "gradient"
  }},
  "about": {{
    "title": "string",
    "description": "string",
    "bullet_points": ["string", "string", "string"],
    "image_placement": "right"
  }},
  "how_it_works": {{
    "title": "How It Works",
    "steps": [
      {{"title": "string", "description": "string", "icon_name": "Calendar"}},
      {{"title": "string", "description": "string", "icon_name": "BookOpen"}},
      {{"title": "string", "description": "string", "icon_name": "TrendingUp"}}
    ]
  }},
  "sections_enabled": ["hero", "about", "how_it_works", "testimonials", "pricing", "cta"]
}}"""

    def __init__(self, client: Any = None):
        self._client = client
        if self._client is None and settings.OPENAI_API_KEY:
            self._client = openai.OpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.OPENAI_TIMEOUT,
                max_retries=0,
            )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def build_system_prompt(self, niche: Optional[str] = None, tone: Optional[str] = None) -> str:
        return self.SYSTEM_PROMPT.format(
            tone=tone or DEFAULT_TONE,
            niche=niche or DEFAULT_NICHE_LABEL,
        )

    def generate(
        self,
        prompt: str,
        niche: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not self.is_configured:
            logger.warning("OpenAI API key not configured, using fallback template")
            record_generation("fallback")
            return build_fallback_config(prompt, niche)

        try:
            response = self._client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": self.build_system_prompt(niche, tone)},
                    {"role": "user", "content": prompt},
                ],
                temperature=settings.OPENAI_TEMPERATURE,
                max_tokens=settings.OPENAI_MAX_TOKENS,
                response_format={"type": "json_object"},
            )
            content = response.choices[0].message.content
            generated = GeneratedLandingPage.model_validate(json.loads(content))
        except openai.OpenAIError as e:
            logger.error("Landing page generation failed: %s", e)
            record_generation("fallback")
            return build_fallback_config(prompt, niche)
        except (json.JSONDecodeError, TypeError, ValidationError, AttributeError, IndexError) as e:
            logger.error("Unparseable landing page completion: %s", e)
            record_generation("fallback")
            return build_fallback_config(prompt, niche)

        record_generation("openai")
        config = generated.model_dump(exclude_none=True)
        if config.get("sections_enabled") is None:
            config["sections_enabled"] = list(SECTION_KEYS)
        config.update(_fixed_sections())
        config["override_fields"] = {}
        return config


def save_generated_config(
    db: Session,
    workspace: Workspace,
    prompt: str,
    config: Dict[str, Any],
) -> LandingPagePrompt:
    """Persist a generation: deactivate prior prompts, store the new active one,
    and write the config onto the workspace."""
    db.query(LandingPagePrompt).filter(
        LandingPagePrompt.workspace_id == workspace.id,
        LandingPagePrompt.is_active == True,  # noqa: E712
    ).update({"is_active": False}, synchronize_session=False)

    record = LandingPagePrompt(
        workspace_id=workspace.id,
        prompt_text=prompt,
        generated_config=config,
        is_active=True,
    )
    db.add(record)
    workspace.landing_page_config = config
    db.add(workspace)
    db.commit()
    db.refresh(record)

    logger.info("Saved generated landing page for workspace %s", workspace.id)
    return record


def get_active_prompt(db: Session, workspace_id) -> Optional[LandingPagePrompt]:
    return db.query(LandingPagePrompt).filter(
        LandingPagePrompt.workspace_id == workspace_id,
        LandingPagePrompt.is_active == True,  # noqa: E712
    ).first()
