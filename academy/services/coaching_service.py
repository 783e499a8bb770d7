import json
import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Sequence

from sqlalchemy.orm import Session

from academy.core import ai_service, prompt_manager
from academy.schemas.functions.functions_schema import CoachingReply, ConversationTurn
from academy.services.submission_service import get_exercise_instance

logger = logging.getLogger(__name__)

COACHING_TEMPERATURE = 0.7
COACHING_MAX_OUTPUT_TOKENS = 1000

CANNED_REPLIES: List[Dict[str, Any]] = [
    {
        "message": "That's a good start! Let's dig deeper into this. What evidence do you have that this is actually a pain point for your customers?",
        "probeQuestions": [
            "How did you discover this pain?",
            "What are customers currently doing to work around this problem?",
            "How much time or money are they spending on workarounds?",
        ],
        "hints": [
            "Look for direct customer quotes that express frustration",
            "Consider the urgency - is this a 'nice to have' or 'must solve'?",
        ],
        "encouragement": "You're on the right track. Keep pushing for specificity!",
    },
    {
        "message": "Interesting perspective. Now let's think about this strategically - what assumptions are you making here?",
        "probeQuestions": [
            "What would need to be true for this to work?",
            "What could cause this approach to fail?",
            "Have you seen similar solutions succeed or fail? Why?",
        ],
        "hints": [
            "Challenge your own thinking - play devil's advocate",
            "Think about second-order effects",
        ],
        "encouragement": "Great progress! Strategic thinking is about questioning assumptions.",
    },
]


def canned_reply() -> CoachingReply:
    return CoachingReply.model_validate(random.choice(CANNED_REPLIES))


def format_conversation(history: Sequence[ConversationTurn]) -> str:
    return "\n".join(f"{turn.role}: {turn.content}" for turn in history)


class CoachingService:
    """Socratic coaching replies for an exercise in progress."""

    def __init__(self, db: Session):
        self.db = db

    def build_prompt(
        self,
        *,
        exercise_name: str,
        coaching_prompt: str,
        template_config: Mapping[str, Any],
        user_message: str,
        history: Sequence[ConversationTurn],
        current_response: Mapping[str, Any],
    ) -> str:
        return prompt_manager.get_prompt(
            "functions.coach",
            coaching_prompt=coaching_prompt or "",
            exercise_name=exercise_name,
            template_structure=json.dumps(template_config),
            current_progress=json.dumps(current_response or {}, indent=2),
            conversation=format_conversation(history),
            user_message=user_message,
        )

    def reply(
        self,
        instance_id: int,
        user_message: str,
        history: Optional[Sequence[ConversationTurn]] = None,
        current_response: Optional[Mapping[str, Any]] = None,
    ) -> CoachingReply:
        """
        Ask the model for the next coaching turn. Raises ``ExerciseNotFoundError``
        for an unknown exercise; any AI failure yields a canned reply instead.
        """
        instance = get_exercise_instance(self.db, instance_id)
        template = instance.template

        if not ai_service.is_available():
            logger.warning("No AI credential configured, using canned coaching reply")
            return canned_reply()

        prompt = self.build_prompt(
            exercise_name=template.name,
            coaching_prompt=template.ai_coaching_prompt_template,
            template_config=template.template_config,
            user_message=user_message,
            history=list(history or []),
            current_response=current_response or {},
        )
        try:
            data = ai_service.generate_json(
                prompt,
                temperature=COACHING_TEMPERATURE,
                max_output_tokens=COACHING_MAX_OUTPUT_TOKENS,
            )
            if not data.get("message"):
                raise ValueError("Coaching reply without a message")
            return CoachingReply.model_validate(data)
        except ai_service.AI_ERRORS as exc:
            logger.error("AI coaching failed, using canned reply: %s", exc)
            return canned_reply()
