"""Request/response contracts of the AI function endpoints (camelCase on the wire)."""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


# --- ai-coach-chat ---

class ConversationTurn(CamelModel):
    role: Literal["user", "assistant"]
    content: str


class CoachChatRequest(CamelModel):
    exercise_instance_id: int
    user_message: str
    conversation_history: List[ConversationTurn] = Field(default_factory=list)
    current_response: Dict[str, Any] = Field(default_factory=dict)


class CoachingReply(CamelModel):
    message: str
    probe_questions: List[str] = Field(default_factory=list)
    hints: List[str] = Field(default_factory=list)
    encouragement: str = ""


# --- evaluate-exercise ---

class EvaluateRequest(CamelModel):
    submission_id: int


class EvaluationResult(CamelModel):
    overall_score: int
    # Keys are rubric criterion names, kept verbatim.
    criteria_scores: Dict[str, int] = Field(default_factory=dict)
    feedback: str = ""
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)


# --- social-listening ---

class SocialListeningRequest(CamelModel):
    topic: str = ""
    platforms: List[str] = Field(default_factory=list)
    depth: Literal["quick", "comprehensive"] = "quick"


class PainPoint(CamelModel):
    theme: str
    frequency: int = 0
    urgency: Literal["high", "medium", "low"] = "medium"
    examples: List[str] = Field(default_factory=list)
    sources: List[str] = Field(default_factory=list)


class IdealCustomerProfile(CamelModel):
    demographics: List[str] = Field(default_factory=list)
    behaviors: List[str] = Field(default_factory=list)
    motivations: List[str] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    top_pain_points: List[PainPoint] = Field(default_factory=list)
    ideal_customer_profile: IdealCustomerProfile = Field(default_factory=IdealCustomerProfile)
    competitor_gaps: List[str] = Field(default_factory=list)
    opportunity_score: int = 0
    recommendations: List[str] = Field(default_factory=list)
    raw_insights: str = ""
