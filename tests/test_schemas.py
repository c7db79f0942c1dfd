#!/usr/bin/env python3
"""
Schema Tests

Wire names, defaults and validation rules of the prompt API contracts.
"""

import os
import sys

import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from web_ui.api.schemas.agent_schemas import SuggestionAgentOutput
from web_ui.api.schemas.prompt_schemas import (
    AutoGeneratePromptRequest,
    EnhancePromptResponse,
    GenerateSuggestionsRequest,
    StructurePromptRequest,
)


class TestPromptSchemas:
    def test_camel_case_and_field_names_both_accepted(self):
        assert GenerateSuggestionsRequest(category="style", currentPrompt="A").current_prompt == "A"
        assert GenerateSuggestionsRequest(category="style", current_prompt="A").current_prompt == "A"

    def test_response_dumps_camel_case(self):
        dumped = EnhancePromptResponse(enhanced_prompt="x").model_dump(by_alias=True)
        assert dumped == {"enhancedPrompt": "x"}

    def test_suggestion_count_bounds(self):
        assert GenerateSuggestionsRequest(category="style").count == 8
        assert GenerateSuggestionsRequest(category="style", count=20).count == 20
        with pytest.raises(ValidationError):
            GenerateSuggestionsRequest(category="style", count=21)

    @pytest.mark.parametrize("basic", ["", "one", "two words", "   a   b  "])
    def test_basic_prompt_needs_three_words(self, basic):
        with pytest.raises(ValidationError, match="at least 3 words"):
            AutoGeneratePromptRequest(basicPrompt=basic)

    def test_basic_prompt_with_extra_whitespace(self):
        assert AutoGeneratePromptRequest(basicPrompt="  a  cat  sleeps ").basic_prompt == "  a  cat  sleeps "

    def test_structure_accepts_empty(self):
        assert StructurePromptRequest(currentPrompt="").current_prompt == ""


class TestAgentSchemas:
    def test_output_tolerates_metadata(self):
        output = SuggestionAgentOutput.model_validate({
            "suggestions": [{"title": "Fog", "description": "Low fog", "confidence": 0.4}],
            "metadata": {"latencyMs": 120, "warnings": ["slow"]},
        })
        assert output.metadata.latency_ms == 120
        assert output.suggestions[0].id is None

    def test_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            SuggestionAgentOutput.model_validate({
                "suggestions": [{"title": "Fog", "description": "Low fog", "confidence": 2}],
            })
