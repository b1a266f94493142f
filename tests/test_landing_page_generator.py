"""Landing page generation: completion path and deterministic fallback."""
import json
import uuid
from types import SimpleNamespace

import httpx
import openai

from blueprintos.models.landing_page_prompt import LandingPagePrompt
from blueprintos.models.workspace import Workspace
from blueprintos.services.landing_page import SECTION_KEYS
from blueprintos.services.landing_page_generator import (
    GENERIC_ABOUT_DESCRIPTION,
    LandingPageGenerator,
    build_fallback_config,
    get_active_prompt,
    save_generated_config,
)

LONG_PROMPT = (
    "I help busy executives in their forties rebuild strength and energy through "
    "short, science-based strength sessions, nutrition habits and weekly accountability "
    "calls so they can keep up with their kids and stay sharp at work without spending "
    "hours in the gym every single week."
)

COMPLETION = {
    "hero": {
        "headline": "Stronger at Forty",
        "subheadline": "Science-based strength coaching for busy executives",
        "cta_primary_text": "Book a Call",
        "cta_secondary_text": "See Programs",
        "background_style": "gradient",
    },
    "about": {
        "title": "Meet Your Coach",
        "description": "Ten years helping leaders get strong.",
        "bullet_points": ["Short sessions", "Nutrition habits", "Weekly check-ins"],
        "image_placement": "left",
    },
    "how_it_works": {
        "title": "How It Works",
        "steps": [
            {"title": "Assess", "description": "Baseline tests", "icon_name": "Target"},
            {"title": "Plan", "description": "Your program", "icon_name": "BookOpen"},
            {"title": "Train", "description": "Three sessions a week", "icon_name": "Zap"},
        ],
    },
    "sections_enabled": ["hero", "about", "how_it_works", "pricing", "cta"],
}


class _FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(content=None, error=None):
    completions = _FakeCompletions(content, error)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_fallback_without_api_key():
    generator = LandingPageGenerator()
    assert not generator.is_configured

    config = generator.generate(LONG_PROMPT, niche="fitness")
    assert config == build_fallback_config(LONG_PROMPT, "fitness")


def test_fallback_fitness_headline():
    config = build_fallback_config("short", "fitness")
    assert config["hero"]["headline"] == "Transform Your Fitness Journey"


def test_fallback_niche_only_changes_hero():
    base = build_fallback_config(LONG_PROMPT)
    fitness = build_fallback_config(LONG_PROMPT, "fitness")

    assert base["hero"]["headline"] == "Transform Your Life"
    for key in ("about", "how_it_works", "testimonials", "pricing_display", "theme", "sections_enabled"):
        assert base[key] == fitness[key]


def test_fallback_unknown_niche_uses_base_hero():
    assert build_fallback_config("short", "underwater basket weaving")["hero"]["headline"] == "Transform Your Life"


def test_fallback_about_from_long_prompt():
    config = build_fallback_config(LONG_PROMPT)
    assert len(LONG_PROMPT) > 200
    assert config["about"]["description"] == LONG_PROMPT[:200]


def test_fallback_about_generic_for_short_prompt():
    config = build_fallback_config("I coach runners.")
    assert config["about"]["description"] == GENERIC_ABOUT_DESCRIPTION
    # exactly 50 chars is still "short"
    assert build_fallback_config("x" * 50)["about"]["description"] == GENERIC_ABOUT_DESCRIPTION


def test_fallback_is_deterministic():
    assert build_fallback_config(LONG_PROMPT, "business") == build_fallback_config(LONG_PROMPT, "business")


def test_fallback_shape():
    config = build_fallback_config("")
    assert config["sections_enabled"] == list(SECTION_KEYS)
    assert config["override_fields"] == {}
    assert len(config["how_it_works"]["steps"]) == 3


def test_completion_result_used_and_completed():
    client, completions = _fake_client(json.dumps(COMPLETION))
    config = LandingPageGenerator(client=client).generate(LONG_PROMPT, niche="fitness", tone="motivational")

    assert config["hero"]["headline"] == "Stronger at Forty"
    assert config["sections_enabled"] == COMPLETION["sections_enabled"]
    assert config["testimonials"]["layout"] == "slider"
    assert config["pricing_display"]["layout_style"] == "cards"
    assert config["override_fields"] == {}

    call = completions.calls[0]
    assert call["response_format"] == {"type": "json_object"}
    system = call["messages"][0]["content"]
    assert "Tone: motivational" in system
    assert "Niche: fitness" in system


def test_system_prompt_defaults():
    system = LandingPageGenerator(client=object()).build_system_prompt()
    assert "Tone: professional and motivational" in system
    assert "Niche: general coaching" in system


def test_api_error_falls_back():
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    client, _ = _fake_client(error=error)
    config = LandingPageGenerator(client=client).generate(LONG_PROMPT, niche="fitness")
    assert config == build_fallback_config(LONG_PROMPT, "fitness")


def test_unparseable_reply_falls_back():
    client, _ = _fake_client("not json at all")
    assert LandingPageGenerator(client=client).generate("short") == build_fallback_config("short")


def test_wrong_shape_falls_back_without_hybrid():
    client, _ = _fake_client(json.dumps({"hero": COMPLETION["hero"]}))
    config = LandingPageGenerator(client=client).generate("short")
    assert config == build_fallback_config("short")


def test_save_generated_config_keeps_one_active_prompt(db):
    ws = Workspace(name="Acme", subdomain="acme", owner_id=uuid.uuid4())
    db.add(ws)
    db.commit()

    first = save_generated_config(db, ws, "first", build_fallback_config("first"))
    second = save_generated_config(db, ws, "second", build_fallback_config("second", "fitness"))

    db.refresh(first)
    assert first.is_active is False
    assert second.is_active is True
    assert db.query(LandingPagePrompt).count() == 2
    assert get_active_prompt(db, ws.id).id == second.id

    db.refresh(ws)
    assert ws.landing_page_config["hero"]["headline"] == "Transform Your Fitness Journey"
