# app/llm.py
import os
import logging
from typing import List, Optional

from openai import OpenAI

from app import config
from app.schemas import Coordinates, HangoutParams

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("VIBE_PLANNER_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

if config.OPENAI_API_KEY:
    _client: Optional[OpenAI] = OpenAI(api_key=config.OPENAI_API_KEY)
else:  # pragma: no cover - exercised indirectly in tests without API key
    _client = None
    logger.warning("OPENAI_API_KEY not set; returning stubbed plan text")

PLAN_OPTIONS_SYSTEM = """You are a local hangout planner for Accra, Ghana.
Suggest exactly two options. Separate options with a line containing only ---.
Write each option as plain 'Label: value' lines, in this order:
OPTION <n>
Title:
Image URL: (a direct https link to a photo of the venue, or 'Not available')
Category: (one of: Relax & Unwind, Food & Nightlife, Sports & Games,
  Active & Adventure, Movies & Plays, Romantic Date, Picnic & Parks)
Location:
Rating:
Opening Hours:
Essentials Checklist:
- Dress Code:
- Noise Level:
- Seating:
Picnic Essentials: (only for Picnic & Parks, followed by '- item' lines)
Description:
Cost:
Estimated Ride Cost:
Weather:
Pro-Tip:
After the last option add '---' and one line starting with 'Recommendation:'
that names the recommended option's exact Title.
Write 'Not available' for facts you cannot confirm. Do not use markdown tables.
"""

PLAN_OPTIONS_TEMPLATE = """Hangout request:
vibe: {vibe}
time window: {time_window}
budget: {budget}
audience: {audience}
timing: {timing}
specific time: {specific_date_time}
group size: {group_size}
travel preference: {travel_preference}
must haves: {must_haves}
open now only: {open_now_only}
meal (date nights): {date_meal}
proximity: {proximity}
"""

TRAVEL_SYSTEM = """You estimate travel for a single trip inside Accra, Ghana.
Reply with these lines only:
Title: Travel & Weather Forecast
Travel Estimate:
Distance:
Travel Time:
Traffic:
Weather Forecast:
Keep each value on one line. Write 'Could not be determined' when unsure.
"""

TRAVEL_TEMPLATE = """From: {origin}{coords}
To: {destination}
Departure: {intended_time}
"""

STUB_PLAN_TEXT = """OPTION 1
Title: Sandbox Beach Club
Image URL: Not available
Category: Relax & Unwind
Location: Sandbox, Labadi, Accra
Rating: Not available
Opening Hours: Not available
Essentials Checklist:
- Dress Code: Casual
- Noise Level: Moderate
- Seating: Mixed seating
Description: Offline suggestion while the planning model is unavailable.
Cost: Not available
Pro-Tip: Call ahead to confirm hours.
---
OPTION 2
Title: Legon Botanical Garden
Image URL: Not available
Category: Picnic & Parks
Location: Legon Botanical Garden, Accra
Rating: Not available
Opening Hours: Not available
Picnic Essentials:
- Picnic mat
- Bottled water
Description: Offline suggestion while the planning model is unavailable.
Cost: Not available
Pro-Tip: Go early before the afternoon heat.
---
Recommendation: Sandbox Beach Club"""

STUB_TRAVEL_TEXT = """Title: Travel & Weather Forecast
Travel Estimate:
Distance: Could not be determined
Travel Time: Could not be determined
Traffic: Could not be determined
Weather Forecast: Could not be determined"""


def _describe_coords(coords: Optional[Coordinates]) -> str:
    if coords is None:
        return ""
    return f" ({coords.latitude:.5f}, {coords.longitude:.5f})"


def _complete(system: str, user_prompt: str, model: str) -> str:
    resp = _client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": user_prompt},
        ],
        temperature=0.7,
    )
    return (resp.choices[0].message.content or "").strip()


def generate_plan_options(params: HangoutParams, model: Optional[str] = None) -> str:
    """Ask the model for plan options in the planner's text format."""
    model = model or config.MODEL
    must_haves: List[str] = params.must_haves or []
    user_prompt = PLAN_OPTIONS_TEMPLATE.format(
        vibe=params.vibe or "surprise me",
        time_window=params.time_window or "unspecified",
        budget=params.budget or "unspecified",
        audience=params.audience or "unspecified",
        timing=params.timing or "unspecified",
        specific_date_time=params.specific_date_time or "unspecified",
        group_size=params.group_size or "unspecified",
        travel_preference=params.travel_preference or "unspecified",
        must_haves=", ".join(must_haves) if must_haves else "none stated",
        open_now_only="yes" if params.open_now_only else "no",
        date_meal=params.date_meal or "n/a",
        proximity="close to" + _describe_coords(params.location) if params.proximity == "close" else "anywhere",
    )

    if _client is None:
        logger.info("Skipping LLM call; returning stub plan options (missing client or API key)")
        return STUB_PLAN_TEXT

    logger.info("Invoking LLM model %s for plan options (vibe=%s)", model, params.vibe or "any")
    text = _complete(PLAN_OPTIONS_SYSTEM, user_prompt, model)
    logger.info("LLM returned %d characters of plan text", len(text))
    return text


def get_travel_details(
    origin: str,
    destination: str,
    intended_time: str,
    origin_coords: Optional[Coordinates] = None,
    model: Optional[str] = None,
) -> str:
    """Ask the model for the travel & weather block appended to a final plan."""
    model = model or config.MODEL
    user_prompt = TRAVEL_TEMPLATE.format(
        origin=origin,
        coords=_describe_coords(origin_coords),
        destination=destination,
        intended_time=intended_time,
    )

    if _client is None:
        logger.info("Skipping LLM call; returning stub travel estimate for %s", destination)
        return STUB_TRAVEL_TEXT

    logger.info("Invoking LLM model %s for travel estimate to %s", model, destination)
    return _complete(TRAVEL_SYSTEM, user_prompt, model)
