"""
Prompt Engineer - LLM tasks behind the prompt API

Four tasks, each driven by a versioned prompt spec:
- prompt-enhancer: merge one cinematic enhancement into a prompt
- auto-author: expand a short idea into a full prompt
- prompt-structuring: reorganise a prompt into the Sora guide layout
- suggestion-curator: propose new enhancement cards for a category
"""

import json
import time
from dataclasses import dataclass
from typing import List, Optional

from utils.logger import logger
from web_ui.api.schemas.prompt_schemas import EnhancementPayload, Suggestion
from web_ui.api.services.langchain_providers import (
    BaseLangChainProvider,
    LLMProviderError,
    get_llm_provider,
)


# =============================================================================
# Prompt Specs
# =============================================================================

@dataclass(frozen=True)
class PromptSpec:
    id: str
    version: str
    description: str
    system_prompt: str


PROMPT_ENHANCER_V1 = PromptSpec(
    id="prompt-enhancer",
    version="1.0",
    description="Integrate new cinematic elements into an existing prompt while preserving tone and intent.",
    system_prompt="""You are an expert video prompt engineer specializing in Sora AI video generation. Your task is to seamlessly integrate new cinematic elements into existing video prompts while:

1. Preserving the core intent and subject matter of the original prompt
2. Ensuring natural readability and flow
3. Integrating the new element cohesively without redundancy
4. Maintaining professional cinematography language
5. Keeping the prompt concise yet descriptive

When the current prompt is empty, create a complete prompt based on the enhancement description.
When merging, blend the enhancement naturally into the existing prompt rather than simply appending it.""",
)

AUTO_AUTHOR_V1 = PromptSpec(
    id="auto-author",
    version="1.0",
    description="Expand a basic video idea into a fully detailed cinematic prompt.",
    system_prompt="""You are an expert video prompt engineer specializing in Sora AI video generation. Your task is to expand basic video ideas into detailed, cinematic prompts that include:

1. Rich visual descriptions
2. Camera angles and movement
3. Lighting and atmosphere
4. Color palette suggestions
5. Mood and emotion
6. Specific details that bring the scene to life

Keep prompts concise yet evocative (2-4 sentences). Use professional cinematography language while maintaining readability.""",
)

PROMPT_STRUCTURING_V1 = PromptSpec(
    id="prompt-structuring",
    version="1.0",
    description="Restructure existing prompts into the Sora prompt guide template format.",
    system_prompt="""You are an expert video prompt engineer specializing in Sora AI video generation. Your task is to restructure video prompts according to the Sora prompt guide template format.

The structured format should include:
1. A prose scene description in plain language (describe characters, costumes, scenery, weather, and other details)
2. A Cinematography section with:
   - Camera shot: [framing and angle, e.g. wide establishing shot, eye level]
   - Mood: [overall tone, e.g. cinematic and tense, playful and suspenseful, luxurious anticipation]
3. An Actions section with bulleted list of specific beats or gestures
4. A Dialogue section (only if the shot has dialogue)

Preserve ALL content from the original prompt. Organize it intelligently into these sections. If the prompt already follows this structure, maintain it but ensure it's properly formatted. If certain sections don't apply (e.g., no dialogue), omit them.""",
)

SUGGESTION_CURATOR_V1 = PromptSpec(
    id="suggestion-curator",
    version="1.0",
    description="Generate enhancement cards tailored to a user prompt and category.",
    system_prompt="""You are a creative cinematography consultant specializing in Sora AI video generation. Generate diverse, professional enhancement suggestions for video prompts.

Each suggestion should be:
- Contextually relevant to the user's current creative direction
- Specific and actionable
- Varied in style and approach
- Professionally described
- Complementary to what's already described in the prompt

Return suggestions as a JSON array with this structure:
[
  {
    "title": "Brief, catchy title (3-5 words)",
    "description": "Clear, specific description of the cinematic element (one concise sentence)"
  }
]""",
)

PROMPT_SPECS = {
    "enhancer": PROMPT_ENHANCER_V1,
    "auto_author": AUTO_AUTHOR_V1,
    "structuring": PROMPT_STRUCTURING_V1,
    "suggestion": SUGGESTION_CURATOR_V1,
}

CATEGORY_DESCRIPTIONS = {
    "camera-angles": "camera angles and framing perspectives",
    "camera-motion": "camera movement and motion techniques",
    "lighting": "lighting setups and atmospheric lighting effects",
    "style": "visual styles, film aesthetics, and artistic approaches",
    "depth-of-field": "focus techniques and depth of field effects",
    "motion-timing": "timing, pacing, and motion choreography",
    "color-palette": "color schemes and palette choices",
    "weather": "weather conditions and atmospheric effects",
    "time-of-day": "time of day and natural light conditions",
    "composition": "framing composition and visual balance",
    "mood": "emotional tone and mood",
    "texture": "surface textures and film texture treatments",
}


# =============================================================================
# User prompt builders
# =============================================================================

def build_enhance_user_prompt(current_prompt: str, enhancement: EnhancementPayload) -> str:
    if current_prompt:
        return f"""Current prompt: "{current_prompt}"

Enhancement to integrate:
Category: {enhancement.category}
Title: {enhancement.title}
Description: {enhancement.description}

Please merge this enhancement into the current prompt, adjusting the text as needed for natural flow while preserving the original scene's essence. Return ONLY the enhanced prompt text, nothing else."""

    return f"""Create a video prompt incorporating this cinematic element:
Category: {enhancement.category}
Title: {enhancement.title}
Description: {enhancement.description}

Return ONLY the prompt text, nothing else."""


def build_suggestions_user_prompt(category: str, count: int, current_prompt: Optional[str]) -> str:
    category_desc = CATEGORY_DESCRIPTIONS.get(category, "cinematic enhancements")
    if current_prompt and current_prompt.strip():
        return (
            f'Current video prompt: "{current_prompt}"\n\n'
            f"Generate {count} creative and contextually relevant suggestions for {category_desc} "
            "that would enhance this specific scene. Consider what's already described and suggest "
            "complementary options that would elevate the visual storytelling. Make each suggestion "
            "unique and professionally described. Return as a JSON array only."
        )
    return (
        f"Generate {count} creative and diverse suggestions for {category_desc}. Make each one unique "
        "and professionally described, covering a wide range of creative approaches. "
        "Return as a JSON array only."
    )


def build_auto_author_user_prompt(basic_prompt: str) -> str:
    return f"""Expand this basic video idea into a detailed cinematic prompt:

"{basic_prompt}"

Return ONLY the prompt text, nothing else."""


def build_structuring_user_prompt(current_prompt: str) -> str:
    if not current_prompt.strip():
        return (
            "There is no prompt yet. Draft an example prompt in the structured format "
            "(scene description, Cinematography, Actions) that the user can fill in. "
            "Return ONLY the structured prompt text, nothing else."
        )
    return f"""Restructure this video prompt into the Sora prompt guide format:

"{current_prompt}"

Return ONLY the structured prompt text, nothing else."""


def parse_suggestions(raw: str, category: str) -> List[Suggestion]:
    """
    Parse the model's JSON array into suggestions with generated ids.

    Raises LLMProviderError if the output is not a JSON array of objects with
    title and description.
    """
    cleaned = BaseLangChainProvider.clean_json_response(raw)
    try:
        items = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI suggestions: {e}")
        raise LLMProviderError("Failed to generate suggestions") from e

    if not isinstance(items, list):
        logger.error(f"AI suggestions were not a JSON array: {type(items).__name__}")
        raise LLMProviderError("Failed to generate suggestions")

    stamp = int(time.time() * 1000)
    suggestions = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("title") or not item.get("description"):
            logger.warning(f"Skipping malformed suggestion at index {index}")
            continue
        suggestions.append(Suggestion(
            id=f"ai-{category}-{stamp}-{index}",
            title=str(item["title"]).strip(),
            description=str(item["description"]).strip(),
            category=category,
        ))

    if not suggestions:
        raise LLMProviderError("Failed to generate suggestions")
    return suggestions


# =============================================================================
# Prompt Engineer
# =============================================================================

class PromptEngineer:
    """Runs the prompt tasks against an LLM provider"""

    def __init__(self, provider: Optional[BaseLangChainProvider] = None):
        self._provider = provider

    @property
    def provider(self) -> BaseLangChainProvider:
        # Resolved lazily so a missing API key only fails the request, not startup
        if self._provider is None:
            self._provider = get_llm_provider()
        return self._provider

    async def _run(self, spec: PromptSpec, user_prompt: str) -> str:
        logger.debug(f"Running prompt spec {spec.id}@{spec.version}")
        result = await self.provider.generate(user_prompt, system=spec.system_prompt)
        return result.strip()

    async def enhance_prompt(self, current_prompt: str, enhancement: EnhancementPayload) -> str:
        return await self._run(PROMPT_ENHANCER_V1, build_enhance_user_prompt(current_prompt, enhancement))

    async def generate_suggestions(
        self,
        category: str,
        count: int,
        current_prompt: Optional[str] = None,
    ) -> List[Suggestion]:
        raw = await self._run(SUGGESTION_CURATOR_V1, build_suggestions_user_prompt(category, count, current_prompt))
        suggestions = parse_suggestions(raw, category)
        logger.info(f"Generated {len(suggestions)} suggestions for '{category}'")
        return suggestions[:count]

    async def auto_generate_prompt(self, basic_prompt: str) -> str:
        return await self._run(AUTO_AUTHOR_V1, build_auto_author_user_prompt(basic_prompt))

    async def structure_prompt(self, current_prompt: str) -> str:
        return await self._run(PROMPT_STRUCTURING_V1, build_structuring_user_prompt(current_prompt))


_prompt_engineer: Optional[PromptEngineer] = None


def get_prompt_engineer() -> PromptEngineer:
    global _prompt_engineer
    if _prompt_engineer is None:
        _prompt_engineer = PromptEngineer()
    return _prompt_engineer
