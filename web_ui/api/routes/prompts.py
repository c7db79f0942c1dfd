"""Prompt API routes - health, catalog and the four AI prompt operations"""

import sys
import time
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from config import settings
from utils.logger import logger
from core import enhancement_catalog
from web_ui.api.schemas.agent_schemas import SuggestionAgentInput
from web_ui.api.schemas.prompt_schemas import (
    AutoGeneratePromptRequest,
    AutoGeneratePromptResponse,
    EnhancePromptRequest,
    EnhancePromptResponse,
    GenerateSuggestionsRequest,
    GenerateSuggestionsResponse,
    HealthResponse,
    StructurePromptRequest,
    StructurePromptResponse,
)
from web_ui.api.services.prompt_engineer import PromptEngineer, get_prompt_engineer
from web_ui.api.services.suggestion_agent import SuggestionAgent, get_suggestion_agent
from web_ui.api.utils.error_formatter import format_error_response

router = APIRouter()

_started_at = time.monotonic()


def _error_response(error: Exception, label: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=format_error_response(error, label))


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe (not rate limited)"""
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        uptime=round(time.monotonic() - _started_at, 3),
        environment=settings.ENVIRONMENT,
    )


@router.get("/catalog")
async def get_catalog():
    """Static categories, enhancements, presets and starter prompts"""
    return enhancement_catalog.catalog_snapshot()


@router.post("/enhance-prompt", response_model=EnhancePromptResponse)
async def enhance_prompt(
    request: EnhancePromptRequest,
    engineer: PromptEngineer = Depends(get_prompt_engineer),
):
    """Merge one enhancement into the current prompt"""
    try:
        enhanced = await engineer.enhance_prompt(request.current_prompt, request.enhancement)
    except Exception as e:
        return _error_response(e, "Failed to enhance prompt")
    return EnhancePromptResponse(enhanced_prompt=enhanced)


@router.post("/generate-suggestions", response_model=GenerateSuggestionsResponse)
async def generate_suggestions(
    request: GenerateSuggestionsRequest,
    agent: SuggestionAgent = Depends(get_suggestion_agent),
):
    """Fresh enhancement cards for a category"""
    try:
        suggestions = await agent.generate(SuggestionAgentInput(
            category=request.category,
            count=request.count,
            current_prompt=request.current_prompt,
        ))
    except Exception as e:
        return _error_response(e, "Failed to generate suggestions")
    return GenerateSuggestionsResponse(suggestions=suggestions)


@router.post("/auto-generate-prompt", response_model=AutoGeneratePromptResponse)
async def auto_generate_prompt(
    request: AutoGeneratePromptRequest,
    engineer: PromptEngineer = Depends(get_prompt_engineer),
):
    """Expand a short idea into a full cinematic prompt"""
    try:
        generated = await engineer.auto_generate_prompt(request.basic_prompt)
    except Exception as e:
        return _error_response(e, "Failed to auto-generate prompt")
    return AutoGeneratePromptResponse(generated_prompt=generated)


@router.post("/structure-prompt", response_model=StructurePromptResponse)
async def structure_prompt(
    request: StructurePromptRequest,
    engineer: PromptEngineer = Depends(get_prompt_engineer),
):
    """Reorganise a prompt into scene / cinematography / actions sections"""
    try:
        structured = await engineer.structure_prompt(request.current_prompt)
    except Exception as e:
        return _error_response(e, "Failed to structure prompt")
    logger.debug(f"Structured prompt ({len(structured)} chars)")
    return StructurePromptResponse(structured_prompt=structured)
