# app/orchestrator.py
from __future__ import annotations

import os
import asyncio
import logging
from typing import Any, Dict

from app import config
from app.history import PlanHistory
from app.llm import generate_plan_options, get_travel_details  # import at module top so tests can patch here
from app.plan_parser import (
    build_final_plan,
    get_destination_from_plan,
    get_recommended_plan_title,
    parse_plans,
    parse_travel_details,
    split_final_plan,
)
from app.plan_views import build_plan_cards, median_cost_by_category
from app.schemas import Coordinates, FinalPlanView, HangoutParams, PlanParseResult
from app.tools.date_time import normalize_time_input

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("VIBE_PLANNER_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False


class PlannerError(Exception):
    """Base class for failures of the planning flow (never raised by the parser)."""


class MissingDestinationError(PlannerError):
    pass


class GenerationError(PlannerError):
    pass


_history = PlanHistory(config.HISTORY_PATH, limit=config.HISTORY_LIMIT)


def get_history() -> PlanHistory:
    return _history


def describe_options(content: str, history: PlanHistory | None = None) -> Dict[str, Any]:
    """Parse option text into the payload the option screen renders."""
    history = history or _history
    result = parse_plans(content)
    if not result.plans:
        logger.warning("No plan options found in %d characters of text", len(content))

    medians = median_cost_by_category(history.entries())
    cards = build_plan_cards(result, medians)
    payload = result.model_dump(mode="json", by_alias=True)
    payload["recommendedTitle"] = get_recommended_plan_title(result.recommendation)
    payload["cards"] = [card.model_dump(mode="json", by_alias=True) for card in cards]
    return payload


def describe_final_plan(content: str) -> FinalPlanView:
    """Re-parse a final plan composite into the selected plan and its travel forecast."""
    sections = split_final_plan(content)
    plans = parse_plans(sections.plan_section).plans
    travel = parse_travel_details(sections.travel_section)
    if travel is None:
        logger.info("Final plan has no travel estimate section")
    plan = plans[0] if plans else None
    card = build_plan_cards(PlanParseResult(plans=[plan]), travel=travel)[0] if plan else None
    return FinalPlanView(
        content=content,
        plan=plan,
        card=card,
        travel_details=travel,
        sections=sections,
    )


async def generate_options(params: HangoutParams, history: PlanHistory | None = None) -> Dict[str, Any]:
    logger.info(
        "Generating options: vibe=%s, budget=%s, timing=%s",
        params.vibe or "any",
        params.budget or "unspecified",
        params.timing or "unspecified",
    )
    try:
        content = await asyncio.to_thread(generate_plan_options, params)
    except Exception as exc:
        logger.exception("Plan generation failed: %s", exc)
        raise GenerationError("The planner could not generate options right now.") from exc

    payload = describe_options(content, history)
    payload["content"] = content
    logger.info("Generated %d option(s)", len(payload["plans"]))
    return payload


async def finalize_plan(
    selected_plan: str,
    origin: str,
    intended_time: str,
    origin_coords: Coordinates | None = None,
    history: PlanHistory | None = None,
) -> FinalPlanView:
    """Attach a travel forecast to the chosen option, save it and return its view."""
    history = history or _history
    normalized_time = normalize_time_input(intended_time)

    destination = get_destination_from_plan(selected_plan)
    if not destination:
        raise MissingDestinationError("Could not find a destination in the selected plan.")

    logger.info("Finalizing plan: origin=%s, destination=%s, time=%s", origin, destination, normalized_time)
    try:
        travel_text = await asyncio.to_thread(
            get_travel_details, origin, destination, normalized_time, origin_coords
        )
    except Exception as exc:
        logger.exception("Travel estimate failed: %s", exc)
        raise GenerationError("The planner could not estimate travel right now.") from exc

    composite = build_final_plan(selected_plan, travel_text)
    history.save(composite)
    return describe_final_plan(composite)
