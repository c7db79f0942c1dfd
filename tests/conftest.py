#!/usr/bin/env python3
"""
Pytest Configuration and Shared Fixtures

Provides shared fixtures and configuration for all tests.
"""

import asyncio
import os
import sys
from typing import Dict, List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.enhancement import Enhancement
from core.collaborators import PromptCollaborator, PromptProviderError


# ============================================================================
# ASYNCIO CONFIGURATION
# ============================================================================
# Note: pytest-asyncio is configured with asyncio_mode = "auto" in pyproject.toml
# The event loop is automatically managed per-function by default

# Short quiet period so debounce tests run fast
TEST_DEBOUNCE_SECONDS = 0.05


# ============================================================================
# FAKE COLLABORATOR
# ============================================================================

class FakeCollaborator(PromptCollaborator):
    """
    Deterministic in-memory collaborator.

    merge: "<base> + <title>" (or just the title for an empty base)
    failures: add enhancement ids to `fail_ids`, or set `fail_all`
    gating: put an asyncio.Event in `gates[enhancement_id]` to hold a merge in flight
    """

    def __init__(self):
        self.merge_calls: List[tuple] = []
        self.suggestion_calls: List[tuple] = []
        self.fail_ids: Set[str] = set()
        self.fail_all = False
        self.fail_suggestions = False
        self.gates: Dict[str, asyncio.Event] = {}
        self.suggestions: Dict[str, List[Enhancement]] = {}

    async def merge_enhancement(self, current_prompt: str, enhancement: Enhancement) -> str:
        self.merge_calls.append((current_prompt, enhancement.id))
        gate = self.gates.get(enhancement.id)
        if gate is not None:
            await gate.wait()
        if self.fail_all or enhancement.id in self.fail_ids:
            raise PromptProviderError(f"merge failed for {enhancement.id}")
        if not current_prompt:
            return enhancement.title
        return f"{current_prompt} + {enhancement.title}"

    async def fetch_suggestions(
        self,
        category: str,
        count: int,
        current_prompt: Optional[str] = None,
    ) -> List[Enhancement]:
        self.suggestion_calls.append((category, count, current_prompt))
        if self.fail_all or self.fail_suggestions:
            raise PromptProviderError("suggestions failed")
        if category in self.suggestions:
            return self.suggestions[category][:count]
        return [
            Enhancement(id=f"ai-{category}-{i}", title=f"Idea {i}", description=f"Fresh idea {i}", category=category)
            for i in range(count)
        ]

    async def auto_generate(self, basic_prompt: str) -> str:
        if self.fail_all:
            raise PromptProviderError("auto-generate failed")
        return f"A cinematic take on {basic_prompt}"

    async def structure_prompt(self, current_prompt: str) -> str:
        if self.fail_all:
            raise PromptProviderError("structure failed")
        return f"{current_prompt}\n\nCinematography:\nCamera shot: wide"


@pytest.fixture
def collaborator():
    return FakeCollaborator()


@pytest.fixture
def session(collaborator):
    from core.prompt_session import PromptSession
    return PromptSession(collaborator, debounce_seconds=TEST_DEBOUNCE_SECONDS)


@pytest.fixture
def golden_hour():
    return Enhancement("l-1", "Golden Hour", "Warm, soft natural light during sunrise or sunset", "lighting")


@pytest.fixture
def blue_hour():
    return Enhancement("l-8", "Blue Hour", "Cool twilight tones with deep blue sky", "lighting")


@pytest.fixture
def low_angle():
    return Enhancement("ca-4", "Low Angle", "Camera positioned below subject looking up, emphasizing power", "camera-angles")


# ============================================================================
# FASTAPI TEST CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def app():
    """FastAPI application with a clean rate limiter and no dependency overrides"""
    from web_ui.api.main import app
    from web_ui.api.middleware.rate_limit import rate_limiter

    rate_limiter.reset()
    app.dependency_overrides.clear()
    yield app
    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def client(app):
    """Create synchronous test client"""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def mock_engineer(app):
    """PromptEngineer replaced by AsyncMocks for every route that uses it"""
    from web_ui.api.services.prompt_engineer import PromptEngineer, get_prompt_engineer

    engineer = MagicMock(spec=PromptEngineer)
    engineer.enhance_prompt = AsyncMock(return_value="A serene beach at golden hour")
    engineer.auto_generate_prompt = AsyncMock(return_value="A detailed cinematic prompt")
    engineer.structure_prompt = AsyncMock(return_value="Scene.\n\nCinematography:\nCamera shot: wide")
    engineer.generate_suggestions = AsyncMock(return_value=[])
    app.dependency_overrides[get_prompt_engineer] = lambda: engineer
    return engineer


@pytest.fixture
def mock_agent(app):
    from web_ui.api.services.suggestion_agent import SuggestionAgent, get_suggestion_agent

    agent = MagicMock(spec=SuggestionAgent)
    agent.generate = AsyncMock(return_value=[])
    app.dependency_overrides[get_suggestion_agent] = lambda: agent
    return agent


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (may require network)"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (may take several seconds)"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection based on markers"""
    if config.getoption("--skip-integration", default=False):
        skip_integration = pytest.mark.skip(reason="--skip-integration option provided")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Add custom command line options"""
    parser.addoption(
        "--skip-integration",
        action="store_true",
        default=False,
        help="Skip integration tests"
    )
