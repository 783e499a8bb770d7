import logging
from typing import Sequence

from academy.core import ai_service, prompt_manager
from academy.schemas.functions.functions_schema import AnalysisResult

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.7
ANALYSIS_MAX_OUTPUT_TOKENS = 3000


def mock_analysis(topic: str) -> AnalysisResult:
    """Sample Sales Safari analysis returned when no AI credential is configured."""
    return AnalysisResult.model_validate(
        {
            "topPainPoints": [
                {
                    "theme": "Existing solutions are too expensive for small teams",
                    "frequency": 47,
                    "urgency": "high",
                    "examples": [
                        f"Why does every {topic} tool assume I have a $500/month budget? I'm bootstrapping!",
                        "Love the features but $99/mo is insane for a 2-person team. Switching back to spreadsheets.",
                    ],
                    "sources": ["r/SaaS", "Twitter #startups", "IndieHackers forums"],
                },
                {
                    "theme": "Tools are too complex and have steep learning curves",
                    "frequency": 38,
                    "urgency": "medium",
                    "examples": [
                        f"Spent 3 hours trying to figure out {topic}. Gave up. Just need something simple.",
                        "Why do these tools require a PhD to use? I just want to [solve problem].",
                    ],
                    "sources": ["ProductHunt comments", "r/Entrepreneur", "Twitter"],
                },
                {
                    "theme": "Missing key integration with [specific tool]",
                    "frequency": 29,
                    "urgency": "high",
                    "examples": [
                        "Would be perfect if it integrated with [tool]. Deal breaker without it.",
                        "Seriously? No [integration]? That's like the first thing you should build.",
                    ],
                    "sources": ["Feature request forums", "Reddit threads", "Twitter DMs"],
                },
            ],
            "idealCustomerProfile": {
                "demographics": [
                    "Solo founders or teams of 2-5 people",
                    "Bootstrapped/pre-revenue or early revenue ($0-$50K MRR)",
                    "Tech-savvy but not developers",
                    "Age 25-45, often with day jobs",
                ],
                "behaviors": [
                    "Active in online communities (Reddit, Twitter, IndieHackers)",
                    "Research extensively before buying",
                    "Price-sensitive, look for affordable options",
                    "Prefer simple tools over feature-rich complexity",
                    "Share wins and frustrations publicly",
                ],
                "motivations": [
                    "Want to build sustainable business without VC",
                    "Seeking efficiency and automation",
                    "Frustrated with enterprise-focused expensive tools",
                    "Looking for community and peer support",
                ],
            },
            "competitorGaps": [
                "Most tools are priced for enterprise/VC-funded startups, not bootstrappers",
                "Onboarding is too complex - need simple setup in under 10 minutes",
                "Missing affordable tier for early-stage users ($10-20/month)",
                "No community or peer support built into the product",
                "Customer support is slow or non-existent for cheaper plans",
            ],
            "opportunityScore": 73,
            "recommendations": [
                "Build for bootstrappers first - price at $19-29/month with generous limits",
                "Focus on simplicity over features - onboarding should take <5 minutes",
                "Launch with 1-2 key integrations that competitors are missing",
                "Build community into the product from day 1 (Discord, in-app chat)",
                "Offer founding member lifetime discounts to validate and build word-of-mouth",
            ],
            "rawInsights": (
                f'Based on analysis of conversations about "{topic}", there\'s a clear opportunity for a '
                "bootstrapper-friendly solution. The market is dominated by expensive enterprise tools, leaving "
                "solo founders underserved. High urgency around pricing and complexity. Strong willingness-to-pay "
                "signals if solution addresses these gaps."
            ),
        }
    )


class SocialListeningService:
    """Customer-research analysis of online conversations about a topic."""

    def analyze(self, topic: str, platforms: Sequence[str], depth: str = "quick") -> AnalysisResult:
        """
        Raises ``ValueError`` without a topic or platform. Without an AI
        credential a sample analysis is returned; once the model is called,
        its failures propagate.
        """
        topic = (topic or "").strip()
        platforms = [p for p in (platforms or []) if p and p.strip()]
        if not topic or not platforms:
            raise ValueError("Topic and platforms are required")

        if not ai_service.is_available():
            logger.warning("No AI credential configured, using mock analysis")
            return mock_analysis(topic)

        prompt = prompt_manager.get_prompt(
            "functions.social_listening",
            topic=topic,
            platforms=", ".join(platforms),
            depth=depth,
        )
        data = ai_service.generate_json(
            prompt,
            temperature=ANALYSIS_TEMPERATURE,
            max_output_tokens=ANALYSIS_MAX_OUTPUT_TOKENS,
        )
        logger.info("Social listening analysis done for topic '%s'", topic)
        return AnalysisResult.model_validate(data)
