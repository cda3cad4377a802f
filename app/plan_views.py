# app/plan_views.py
"""Presentation helpers built on top of parsed plan text.

Nothing here re-parses fields on its own: option cards, share text and the
calendar link all read from ``parse_plans`` output or ``get_plan_field``.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from statistics import median
from typing import Dict, Iterable, List
from urllib.parse import quote, urlencode

from app.config import DEFAULT_CITY
from app.plan_parser import (
    get_plan_field,
    get_recommended_plan_title,
    parse_plans,
    split_final_plan,
)
from app.schemas import (
    ParsedPlanOption,
    ParsedTravelDetails,
    PlanCardView,
    PlanParseResult,
    RecommendationSignals,
    SavedPlan,
)
from app.tools.date_time import get_duration_hours, parse_specific_datetime
from app.vibes import DEFAULT_IMAGES, UNKNOWN_VIBE

_COST_DIGITS = re.compile(r"(\d+[,\d]*)")


def image_for_category(category: str) -> str:
    return DEFAULT_IMAGES.get(category) or DEFAULT_IMAGES[UNKNOWN_VIBE]


def opening_confidence(opening_hours: str) -> str:
    if "Not available" in opening_hours or opening_hours == "N/A":
        return "Low"
    if "-" in opening_hours:
        return "High"
    return "Medium"


def cost_to_number(cost_text: str) -> int | None:
    match = _COST_DIGITS.search(cost_text or "")
    if not match:
        return None
    return int(match.group(1).replace(",", ""))


def median_cost_by_category(history: Iterable[SavedPlan]) -> Dict[str, int]:
    """Median cost of past final plans, grouped by vibe.

    Only the first plan of each saved composite is considered; even-sized
    groups take the rounded mean of the two middle values.
    """
    grouped: Dict[str, List[int]] = {}
    for entry in history:
        plan_section = split_final_plan(entry.plan_content).plan_section
        plans = parse_plans(plan_section).plans
        if not plans:
            continue
        cost = cost_to_number(plans[0].cost)
        if cost is None:
            continue
        grouped.setdefault(plans[0].category, []).append(cost)

    # Half-up rounding for the mean of the two middle values.
    return {category: int(median(costs) + 0.5) for category, costs in grouped.items()}


def budget_fit(cost_text: str, category_median: int | None) -> str:
    cost = cost_to_number(cost_text)
    if cost is None or category_median is None:
        return "unknown"
    return "fit" if cost <= category_median else "above"


def distance_confidence(travel: ParsedTravelDetails | None) -> str:
    if travel is None:
        return "unknown"
    known = [value for value in (travel.distance, travel.travel_time) if value != "Could not be determined"]
    if len(known) == 2:
        return "high"
    return "medium" if known else "low"


def map_url(location: str) -> str:
    query = urlencode({"api": 1, "query": f"{location}, {DEFAULT_CITY}"}, quote_via=quote)
    return f"https://www.google.com/maps/search/?{query}"


def ride_url(location: str) -> str:
    query = urlencode(
        {
            "action": "setPickup",
            "pickup": "my_location",
            "dropoff[formatted_address]": f"{location}, {DEFAULT_CITY}",
        },
        quote_via=quote,
    )
    return f"https://m.uber.com/ul/?{query}"


def build_plan_cards(
    result: PlanParseResult,
    medians: Dict[str, int] | None = None,
    travel: ParsedTravelDetails | None = None,
) -> List[PlanCardView]:
    """Card view models for each option, flagging the recommended one."""
    medians = medians or {}
    recommended_title = get_recommended_plan_title(result.recommendation)
    cards: List[PlanCardView] = []
    for plan in result.plans:
        image_url = plan.image_url if plan.image_status == "external" else image_for_category(plan.category)
        signals = RecommendationSignals(
            budget_fit=budget_fit(plan.cost, medians.get(plan.category)),
            open_likelihood=opening_confidence(plan.opening_hours).lower(),
            distance_confidence=distance_confidence(travel),
        )
        cards.append(
            PlanCardView(
                id=plan.id,
                title=plan.title,
                location=plan.location,
                category=plan.category,
                image_url=image_url,
                image_status=plan.image_status,
                is_recommended=plan.title == recommended_title,
                map_url=map_url(plan.location),
                ride_url=ride_url(plan.location),
                recommendation_signals=signals,
            )
        )
    return cards


def _google_calendar_stamp(moment: datetime) -> str:
    # Naive datetimes float in the calendar owner's timezone.
    if moment.tzinfo is None:
        return moment.strftime("%Y%m%dT%H%M%S")
    return moment.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def build_calendar_link(
    result: PlanParseResult,
    specific_date_time: str | None = None,
    time_window: str | None = None,
    now: datetime | None = None,
) -> str | None:
    """Google Calendar template link for the first plan, or ``None`` if there is none."""
    main_plan = result.plans[0].raw_content if result.plans else ""
    if not main_plan:
        return None

    title = f"Vibe Plan: {get_plan_field(main_plan, 'Title')}"
    location = get_plan_field(main_plan, "Location")
    description = "\n".join(
        [
            get_plan_field(main_plan, "Description"),
            f"\nCost: {get_plan_field(main_plan, 'Cost')}",
            f"Rating: {get_plan_field(main_plan, 'Rating')}",
            f"Pro-Tip: {get_plan_field(main_plan, 'Pro-Tip')}",
        ]
    )

    start = parse_specific_datetime(specific_date_time, now)
    end = start + timedelta(hours=get_duration_hours(time_window))
    query = urlencode(
        {
            "action": "TEMPLATE",
            "text": title,
            "dates": f"{_google_calendar_stamp(start)}/{_google_calendar_stamp(end)}",
            "location": location,
            "details": description,
        },
        quote_via=quote,
    )
    return f"https://www.google.com/calendar/render?{query}"


def _final_share_text(plan: ParsedPlanOption) -> str:
    ride = f"Ride: {plan.estimated_ride_cost}" if plan.estimated_ride_cost else "Ride info unavailable"
    weather = plan.weather or "Weather unavailable"
    return (
        "Hey guys, I planned our hangout!\n\n"
        f"*{plan.title}*\n"
        f"Location: {plan.location}\n"
        f"Est. cost: {plan.cost}\n"
        f"{ride}\n"
        f"{weather}\n\n"
        "What time works best for everyone?"
    )


def _poll_share_text(first: ParsedPlanOption, second: ParsedPlanOption) -> str:
    blocks = []
    for number, plan in ((1, first), (2, second)):
        blocks.append(
            f"*Option {number}: {plan.title}*\n"
            f"Location: {plan.location}\n"
            f"Est. cost: {plan.cost}\n"
            f"Ride: {plan.estimated_ride_cost or 'N/A'}"
        )
    return "Help me decide where we should go!\n\n" + "\n\n".join(blocks) + "\n\nReply with 1 or 2!"


def build_share_text(content: str, is_final: bool) -> str | None:
    """Group-chat message for a final plan, or a two-option poll."""
    if is_final:
        plans = parse_plans(split_final_plan(content).plan_section).plans
        return _final_share_text(plans[0]) if plans else None

    plans = parse_plans(content).plans
    if len(plans) < 2:
        return None
    return _poll_share_text(plans[0], plans[1])
