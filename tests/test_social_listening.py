from __future__ import annotations

import pytest
import requests

from academy.core import ai_service
from academy.services.social_listening_service import SocialListeningService, mock_analysis


@pytest.mark.parametrize(
    "topic, platforms",
    [("", ["reddit"]), ("   ", ["reddit"]), ("invoicing", []), ("invoicing", ["", " "])],
)
def test_topic_and_platforms_are_required(topic, platforms):
    with pytest.raises(ValueError, match="Topic and platforms are required"):
        SocialListeningService().analyze(topic, platforms)


def test_mock_analysis_without_credentials(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("the model must not be called")

    monkeypatch.setattr(ai_service, "generate_json", _fail)
    result = SocialListeningService().analyze("invoicing", ["reddit", "twitter"])

    assert result.opportunity_score == 73
    assert len(result.top_pain_points) == 3
    assert "invoicing" in result.top_pain_points[0].examples[0]
    assert '"invoicing"' in result.raw_insights


def test_mock_analysis_wire_format_is_camel_case():
    wire = mock_analysis("crm").to_wire()
    assert set(wire) == {
        "topPainPoints",
        "idealCustomerProfile",
        "competitorGaps",
        "opportunityScore",
        "recommendations",
        "rawInsights",
    }
    assert wire["topPainPoints"][0]["urgency"] == "high"


def test_model_analysis_is_parsed(monkeypatch):
    captured = {}

    def _fake_generate_json(prompt, *, temperature=None, max_output_tokens=None):
        captured.update(prompt=prompt, temperature=temperature, max_output_tokens=max_output_tokens)
        return {
            "topPainPoints": [{"theme": "Slow payouts", "frequency": 12, "urgency": "high", "examples": [], "sources": []}],
            "idealCustomerProfile": {"demographics": ["Freelancers"], "behaviors": [], "motivations": []},
            "competitorGaps": ["No instant payouts"],
            "opportunityScore": 64,
            "recommendations": ["Offer instant payouts"],
            "rawInsights": "Payout speed matters.",
        }

    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(ai_service, "generate_json", _fake_generate_json)

    result = SocialListeningService().analyze("payouts", ["reddit", "indiehackers"], "comprehensive")

    assert result.opportunity_score == 64
    assert result.top_pain_points[0].theme == "Slow payouts"
    assert captured["temperature"] == 0.7
    assert captured["max_output_tokens"] == 3000
    assert "reddit, indiehackers" in captured["prompt"]
    assert "comprehensive" in captured["prompt"]


def test_model_failure_propagates(monkeypatch):
    def _raise(*args, **kwargs):
        raise requests.ConnectionError("provider down")

    monkeypatch.setattr(ai_service, "is_available", lambda: True)
    monkeypatch.setattr(ai_service, "generate_json", _raise)

    with pytest.raises(requests.ConnectionError):
        SocialListeningService().analyze("payouts", ["reddit"])
