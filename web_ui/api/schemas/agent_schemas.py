"""
Agent contracts for the suggestion flow

These schemas validate what a Langflow flow sends back. Optional metadata is
tolerated so flows can evolve without breaking the API.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class SuggestionAgentInput(BaseModel):
    category: str
    count: int = Field(8, ge=1, le=20)
    current_prompt: Optional[str] = None
    applied_categories: List[str] = Field(default_factory=list)
    mode: Literal["simple", "advanced"] = "advanced"
    focus_tags: List[str] = Field(default_factory=list)
    flow_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_flow_input(self) -> Dict[str, Any]:
        """Snake_case payload handed to the Langflow flow"""
        return {
            "category": self.category,
            "count": self.count,
            "current_prompt": self.current_prompt or "",
            "applied_categories": self.applied_categories,
            "focus_tags": self.focus_tags,
            "mode": self.mode,
            "metadata": self.metadata,
        }


class AgentSuggestion(BaseModel):
    id: Optional[str] = None
    title: str
    description: str
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    rationale: Optional[str] = None
    confidence: Optional[float] = Field(None, ge=0, le=1)


class AgentMetadata(BaseModel):
    provider: Optional[str] = None
    latency_ms: Optional[float] = Field(None, alias="latencyMs")
    warnings: Optional[List[str]] = None


class SuggestionAgentOutput(BaseModel):
    suggestions: List[AgentSuggestion]
    metadata: Optional[AgentMetadata] = None
