#!/usr/bin/env python3
"""
Prompt Service Tests

Prompt engineer message building and parsing, the OpenRouter provider, the
Langflow client and the suggestion agent's fallback path.
"""

import json
import os
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.enhancement import Enhancement
from core.collaborators import PromptProviderError, PromptValidationError
from web_ui.api.schemas.agent_schemas import SuggestionAgentInput
from web_ui.api.schemas.prompt_schemas import EnhancementPayload, Suggestion
from web_ui.api.services.langchain_providers import (
    BaseLangChainProvider,
    LangChainProviderFactory,
    LLMConfigurationError,
    LLMProviderError,
    OpenRouterLangChainProvider,
    ProviderConfig,
    describe_upstream_error,
)
from web_ui.api.services.langflow_client import LangflowClient, LangflowError
from web_ui.api.services.local_collaborator import LocalPromptCollaborator
from web_ui.api.services.prompt_engineer import (
    PROMPT_ENHANCER_V1,
    PROMPT_SPECS,
    PromptEngineer,
    build_enhance_user_prompt,
    build_suggestions_user_prompt,
    parse_suggestions,
)
from web_ui.api.services.suggestion_agent import SuggestionAgent


GOLDEN = EnhancementPayload(title="Golden Hour", description="Warm light", category="lighting")


# ============================================================================
# PROMPT ENGINEER
# ============================================================================

class TestPromptTemplates:
    def test_prompt_specs_are_versioned(self):
        assert {spec.id for spec in PROMPT_SPECS.values()} == {
            "prompt-enhancer", "auto-author", "prompt-structuring", "suggestion-curator",
        }
        assert all(spec.version == "1.0" for spec in PROMPT_SPECS.values())

    def test_enhance_merge_template(self):
        text = build_enhance_user_prompt("A beach", GOLDEN)
        assert text.startswith('Current prompt: "A beach"')
        assert "Title: Golden Hour" in text

    def test_enhance_create_template_for_empty_prompt(self):
        text = build_enhance_user_prompt("", GOLDEN)
        assert text.startswith("Create a video prompt")

    def test_suggestions_template_uses_category_description(self):
        assert "lighting setups" in build_suggestions_user_prompt("lighting", 5, None)
        assert "Current video prompt" in build_suggestions_user_prompt("lighting", 5, "A beach")
        assert "cinematic enhancements" in build_suggestions_user_prompt("unknown", 5, "  ")


class TestParseSuggestions:
    def test_plain_array(self):
        raw = json.dumps([{"title": " Noir ", "description": "Dark shadows"}])
        result = parse_suggestions(raw, "style")
        assert result[0].title == "Noir"
        assert result[0].category == "style"
        assert result[0].id.startswith("ai-style-")
        assert result[0].id.endswith("-0")

    def test_fenced_with_think_tags(self):
        raw = '<think>hmm</think>\n```json\n[{"title": "Rim Light", "description": "Edge glow"}]\n```'
        assert parse_suggestions(raw, "lighting")[0].title == "Rim Light"

    def test_garbage_raises_provider_error(self):
        with pytest.raises(LLMProviderError):
            parse_suggestions("Sorry, I can't help with that.", "style")

    def test_object_instead_of_array_raises(self):
        with pytest.raises(LLMProviderError):
            parse_suggestions('{"title": "x", "description": "y"}', "style")

    def test_malformed_items_skipped(self):
        raw = json.dumps([{"title": "Only title"}, {"title": "Good", "description": "Fine"}])
        result = parse_suggestions(raw, "mood")
        assert [s.title for s in result] == ["Good"]
        assert result[0].id.endswith("-1")


class TestPromptEngineer:
    async def test_enhance_uses_enhancer_system_prompt(self):
        provider = MagicMock()
        provider.generate = AsyncMock(return_value="  A beach at golden hour \n")
        engineer = PromptEngineer(provider=provider)

        result = await engineer.enhance_prompt("A beach", GOLDEN)

        assert result == "A beach at golden hour"
        assert provider.generate.await_args.kwargs["system"] == PROMPT_ENHANCER_V1.system_prompt

    async def test_generate_suggestions_caps_count(self):
        items = [{"title": f"T{i}", "description": f"D{i}"} for i in range(5)]
        provider = MagicMock()
        provider.generate = AsyncMock(return_value=json.dumps(items))

        result = await PromptEngineer(provider=provider).generate_suggestions("style", 3)

        assert len(result) == 3


# ============================================================================
# LLM PROVIDER
# ============================================================================

class TestOpenRouterProvider:
    def make_provider(self, api_key="sk-or-test"):
        return LangChainProviderFactory.create(ProviderConfig(
            type="openrouter",
            model="anthropic/claude-3.5-sonnet",
            api_key=api_key,
            referer="https://example.com",
            temperature=0.7,
        ))

    def test_factory_builds_openrouter(self):
        provider = self.make_provider()
        assert isinstance(provider, OpenRouterLangChainProvider)
        assert provider.endpoint == "https://openrouter.ai/api/v1"

    def test_factory_rejects_unknown_type(self):
        config = ProviderConfig.model_construct(type="nope", model="m")
        with pytest.raises(ValueError):
            LangChainProviderFactory.create(config)

    async def test_missing_key_is_configuration_error(self):
        with pytest.raises(LLMConfigurationError, match="OPENROUTER_API_KEY"):
            await self.make_provider(api_key=None).generate("hi")

    async def test_chat_model_configuration(self):
        with patch("web_ui.api.services.langchain_providers.ChatOpenAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=MagicMock(content="merged"))
            provider = self.make_provider()

            result = await provider.generate("user text", system="system text")

        assert result == "merged"
        kwargs = chat_cls.call_args.kwargs
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["model"] == "anthropic/claude-3.5-sonnet"
        assert kwargs["temperature"] == 0.7
        assert kwargs["default_headers"] == {"HTTP-Referer": "https://example.com"}
        assert kwargs["max_retries"] == 0
        messages = chat_cls.return_value.ainvoke.await_args.args[0]
        assert [type(m).__name__ for m in messages] == ["SystemMessage", "HumanMessage"]

    async def test_upstream_failure_is_provider_error(self):
        class APIConnectionError(Exception):
            pass

        with patch("web_ui.api.services.langchain_providers.ChatOpenAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(side_effect=APIConnectionError("refused"))
            with pytest.raises(LLMProviderError, match="Network error"):
                await self.make_provider().generate("hi")

    async def test_empty_completion_is_provider_error(self):
        with patch("web_ui.api.services.langchain_providers.ChatOpenAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=MagicMock(content="   "))
            with pytest.raises(LLMProviderError):
                await self.make_provider().generate("hi")

    def test_describe_upstream_error(self):
        class RateLimitError(Exception):
            pass

        class AuthenticationError(Exception):
            pass

        assert "Rate limit" in describe_upstream_error(RateLimitError("429"))
        assert "Authentication" in describe_upstream_error(AuthenticationError("401"))
        assert describe_upstream_error(KeyError("x")).startswith("KeyError")

    def test_clean_json_response(self):
        assert BaseLangChainProvider.clean_json_response('Here:\n[{"a": 1}] done') == '[{"a": 1}]'


# ============================================================================
# LANGFLOW CLIENT
# ============================================================================

def langflow(handler, **kwargs):
    params = dict(base_url="http://langflow.test/", api_key="lf-key", default_flow_id="flow-1")
    params.update(kwargs)
    return LangflowClient(transport=httpx.MockTransport(handler), **params)


class TestLangflowClient:
    def test_is_configured(self):
        assert LangflowClient(base_url="http://x", api_key="k").is_configured()
        assert not LangflowClient(base_url="http://x").is_configured()
        assert not LangflowClient(api_key="k").is_configured()

    async def test_run_flow_request_shape(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"outputs": [{"outputs": [{"text": "hello"}]}]})

        result = await langflow(handler).run_flow({"category": "style"})

        assert result == "hello"
        assert seen["url"] == "http://langflow.test/api/v1/run/flow-1?stream=false"
        assert seen["key"] == "lf-key"
        assert seen["body"] == {
            "input_value": {"category": "style"},
            "input_type": "structured",
            "output_type": "json",
            "tweaks": {},
        }

    @pytest.mark.parametrize("inner,expected", [
        ({"data": {"text": "from data"}}, "from data"),
        ({"message": {"content": "from message"}}, "from message"),
        ({"data": {"outputs": [{"message": {"content": "nested"}}]}}, "nested"),
    ])
    def test_extract_output_variants(self, inner, expected):
        assert LangflowClient.extract_output({"outputs": [{"outputs": [inner]}]}) == expected

    def test_extract_output_falls_back_to_payload(self):
        payload = {"suggestions": []}
        assert LangflowClient.extract_output(payload) is payload

    async def test_http_error(self):
        with pytest.raises(LangflowError, match="500"):
            await langflow(lambda r: httpx.Response(500, text="down")).run_flow("x")

    async def test_flow_error_field(self):
        with pytest.raises(LangflowError, match="flow error"):
            await langflow(lambda r: httpx.Response(200, json={"error": "bad node"})).run_flow("x")

    async def test_missing_flow_id(self):
        with pytest.raises(LangflowError, match="flowId"):
            await langflow(lambda r: httpx.Response(200, json={}), default_flow_id=None).run_flow("x")

    async def test_run_json_flow_parses_strings(self):
        body = {"outputs": [{"outputs": [{"text": '{"suggestions": []}'}]}]}
        assert await langflow(lambda r: httpx.Response(200, json=body)).run_json_flow("x") == {"suggestions": []}

    async def test_run_json_flow_invalid_json(self):
        body = {"outputs": [{"outputs": [{"text": "not json"}]}]}
        with pytest.raises(LangflowError, match="not valid JSON"):
            await langflow(lambda r: httpx.Response(200, json=body)).run_json_flow("x")


# ============================================================================
# SUGGESTION AGENT
# ============================================================================

FALLBACK = [Suggestion(id="ai-style-1-0", title="Fallback", description="From OpenRouter", category="style")]


def make_agent(langflow_client):
    engineer = MagicMock(spec=PromptEngineer)
    engineer.generate_suggestions = AsyncMock(return_value=FALLBACK)
    return SuggestionAgent(langflow=langflow_client, prompt_engineer=engineer), engineer


class TestSuggestionAgent:
    async def test_unconfigured_langflow_goes_straight_to_openrouter(self):
        agent, engineer = make_agent(LangflowClient())

        result = await agent.generate(SuggestionAgentInput(category="style", count=4, current_prompt="A beach"))

        assert result == FALLBACK
        engineer.generate_suggestions.assert_awaited_once_with("style", 4, "A beach")

    async def test_langflow_output_is_normalised(self):
        flow = MagicMock(spec=LangflowClient)
        flow.is_configured.return_value = True
        flow.run_json_flow = AsyncMock(return_value={
            "suggestions": [
                {"title": "  Neon Rain ", "description": " Wet streets \n"},
                {"id": "keep-me", "title": "Fog", "description": "Low fog", "category": "weather"},
            ],
            "metadata": {"provider": "langflow", "latencyMs": 12},
        })
        agent, engineer = make_agent(flow)

        result = await agent.generate(SuggestionAgentInput(category="style", count=2))

        assert result[0].title == "Neon Rain"
        assert result[0].description == "Wet streets"
        assert result[0].category == "style"
        assert result[0].id.startswith("agent-style-")
        assert result[1].id == "keep-me"
        assert result[1].category == "weather"
        engineer.generate_suggestions.assert_not_awaited()
        flow_input = flow.run_json_flow.await_args.args[0]
        assert flow_input["current_prompt"] == ""
        assert flow_input["mode"] == "advanced"

    @pytest.mark.parametrize("failure", [
        AsyncMock(side_effect=LangflowError("down")),
        AsyncMock(return_value={"suggestions": []}),
        AsyncMock(return_value={"unexpected": "shape"}),
    ])
    async def test_langflow_failures_fall_back(self, failure):
        flow = MagicMock(spec=LangflowClient)
        flow.is_configured.return_value = True
        flow.run_json_flow = failure
        agent, engineer = make_agent(flow)

        assert await agent.generate(SuggestionAgentInput(category="style")) == FALLBACK
        engineer.generate_suggestions.assert_awaited_once()


# ============================================================================
# IN-PROCESS COLLABORATOR
# ============================================================================

class TestLocalPromptCollaborator:
    def make(self):
        engineer = MagicMock(spec=PromptEngineer)
        engineer.enhance_prompt = AsyncMock(return_value="merged")
        engineer.auto_generate_prompt = AsyncMock(return_value="generated")
        engineer.structure_prompt = AsyncMock(side_effect=LLMProviderError("OpenRouter API error: boom"))
        agent = MagicMock(spec=SuggestionAgent)
        agent.generate = AsyncMock(return_value=FALLBACK)
        return LocalPromptCollaborator(prompt_engineer=engineer, suggestion_agent=agent), engineer

    async def test_merge_passes_payload(self, golden_hour):
        collaborator, engineer = self.make()
        assert await collaborator.merge_enhancement("A beach", golden_hour) == "merged"
        payload = engineer.enhance_prompt.await_args.args[1]
        assert payload.title == "Golden Hour"

    async def test_suggestions_become_enhancements(self):
        collaborator, _ = self.make()
        result = await collaborator.fetch_suggestions("style", 1)
        assert result == [Enhancement("ai-style-1-0", "Fallback", "From OpenRouter", "style")]

    async def test_provider_errors_are_mapped(self):
        collaborator, _ = self.make()
        with pytest.raises(PromptProviderError):
            await collaborator.structure_prompt("A beach")

    async def test_short_basic_prompt_is_validation_error(self):
        collaborator, engineer = self.make()
        with pytest.raises(PromptValidationError):
            await collaborator.auto_generate("cat")
        engineer.auto_generate_prompt.assert_not_awaited()
