"""Prompt API request/response schemas (camelCase on the wire)"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


MIN_BASIC_PROMPT_WORDS = 3


class CamelModel(BaseModel):
    """Accepts both the camelCase wire name and the Python field name"""
    model_config = ConfigDict(populate_by_name=True)


class EnhancementPayload(BaseModel):
    """Enhancement fields the merge needs (ids stay client side)"""
    title: str
    description: str
    category: str


class EnhancePromptRequest(CamelModel):
    current_prompt: str = Field(..., alias="currentPrompt")
    enhancement: EnhancementPayload


class EnhancePromptResponse(CamelModel):
    enhanced_prompt: str = Field(..., alias="enhancedPrompt")


class GenerateSuggestionsRequest(CamelModel):
    category: str
    count: int = Field(8, ge=1, le=20)
    current_prompt: Optional[str] = Field(None, alias="currentPrompt")


class Suggestion(BaseModel):
    id: str
    title: str
    description: str
    category: str


class GenerateSuggestionsResponse(BaseModel):
    suggestions: List[Suggestion]


class AutoGeneratePromptRequest(CamelModel):
    basic_prompt: str = Field(..., alias="basicPrompt")

    @field_validator("basic_prompt")
    @classmethod
    def require_min_words(cls, v: str) -> str:
        if len(v.split()) < MIN_BASIC_PROMPT_WORDS:
            raise ValueError(f"Basic prompt must contain at least {MIN_BASIC_PROMPT_WORDS} words")
        return v


class AutoGeneratePromptResponse(CamelModel):
    generated_prompt: str = Field(..., alias="generatedPrompt")


class StructurePromptRequest(CamelModel):
    # Empty is allowed; the model then drafts a skeleton
    current_prompt: str = Field(..., alias="currentPrompt")


class StructurePromptResponse(CamelModel):
    structured_prompt: str = Field(..., alias="structuredPrompt")


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
    environment: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
