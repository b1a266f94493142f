"""
Landing page generation API

GET  /landing-page/prompt-templates   description templates + tone options
POST /landing-page/generate           description -> configuration (optionally saved)
GET  /landing-page/prompts/active     last saved generation
"""
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from blueprintos.api import deps
from blueprintos.models.workspace import Workspace
from blueprintos.schemas.landing_page import (
    GenerationRequest,
    LandingPagePromptOut,
    PromptTemplate,
    PromptTemplates,
    ToneOption,
)
from blueprintos.services.landing_page_generator import (
    PROMPT_TEMPLATES,
    TONE_OPTIONS,
    LandingPageGenerator,
    get_active_prompt,
    save_generated_config,
)

router = APIRouter()


class GenerationResult(BaseModel):
    config: dict
    saved: bool = False
    prompt_id: Optional[str] = None


def _prompt_out(record) -> LandingPagePromptOut:
    return LandingPagePromptOut(
        id=str(record.id),
        prompt_text=record.prompt_text,
        generated_config=record.generated_config,
        is_active=record.is_active,
        created_at=record.created_at.isoformat() if record.created_at else None,
    )


@router.get("/prompt-templates", response_model=PromptTemplates)
def read_prompt_templates() -> Any:
    return PromptTemplates(
        templates=[PromptTemplate(niche=niche.value, template=text) for niche, text in PROMPT_TEMPLATES.items()],
        tones=[ToneOption(**tone) for tone in TONE_OPTIONS],
    )


@router.post("/generate", response_model=GenerationResult)
def generate_landing_page(
    *,
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
    generator: LandingPageGenerator = Depends(deps.get_generator),
    request_in: GenerationRequest,
) -> Any:
    """
    Always returns a configuration; generation failures fall back to templates.
    With ``save=true`` the result becomes the workspace's live page.
    """
    config = generator.generate(request_in.prompt, niche=request_in.niche, tone=request_in.tone)
    if not request_in.save:
        return GenerationResult(config=config)

    record = save_generated_config(db, workspace, request_in.prompt, config)
    return GenerationResult(config=config, saved=True, prompt_id=str(record.id))


@router.get("/prompts/active", response_model=LandingPagePromptOut)
def read_active_prompt(
    db: Session = Depends(deps.get_db),
    workspace: Workspace = Depends(deps.get_current_coach_workspace),
) -> Any:
    record = get_active_prompt(db, workspace.id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No saved generation")
    return _prompt_out(record)
