from types import SimpleNamespace

from app import llm
from app.plan_parser import parse_plans, parse_travel_details
from app.schemas import Coordinates, HangoutParams


class _CompletionsStub:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _client_stub(content):
    completions = _CompletionsStub(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_stub_plan_text_parses_into_two_options(monkeypatch):
    monkeypatch.setattr(llm, "_client", None)

    result = parse_plans(llm.generate_plan_options(HangoutParams()))

    assert len(result.plans) == 2
    assert result.plans[1].picnic_essentials == ["Picnic mat", "Bottled water"]
    assert result.recommendation == "Recommendation: Sandbox Beach Club"


def test_stub_travel_text_has_travel_estimate(monkeypatch):
    monkeypatch.setattr(llm, "_client", None)

    details = parse_travel_details(llm.get_travel_details("Osu", "Labadi", "2026-03-06T19:00"))

    assert details is not None
    assert details.distance == "Could not be determined"


def test_generate_plan_options_sends_request_details(monkeypatch):
    client, completions = _client_stub("  Title: Spot X\nLocation: Osu  ")
    monkeypatch.setattr(llm, "_client", client)
    params = HangoutParams(
        vibe="Romantic Date",
        must_haves=["parking", "live band"],
        proximity="close",
        location=Coordinates(latitude=5.6037, longitude=-0.187),
    )

    text = llm.generate_plan_options(params, model="test-model")

    assert text == "Title: Spot X\nLocation: Osu"
    call = completions.calls[0]
    assert call["model"] == "test-model"
    user_prompt = call["messages"][1]["content"]
    assert "vibe: Romantic Date" in user_prompt
    assert "must haves: parking, live band" in user_prompt
    assert "close to (5.60370, -0.18700)" in user_prompt


def test_get_travel_details_prompt(monkeypatch):
    client, completions = _client_stub("Travel Estimate:\nDistance: 4 km")
    monkeypatch.setattr(llm, "_client", client)

    text = llm.get_travel_details("Airport", "Osu, Accra", "2026-03-06T19:00", model="test-model")

    assert text.startswith("Travel Estimate:")
    user_prompt = completions.calls[0]["messages"][1]["content"]
    assert "From: Airport" in user_prompt
    assert "To: Osu, Accra" in user_prompt
