# app/plan_parser.py
"""Turn the planner's loose, colon-delimited plan text into structured records.

The text produced by the generative service has no fixed schema: options are
separated by ``---``, fields are ``Label: value`` lines that may carry ``-``/``*``
list markers or ``*`` emphasis, two labels (``Essentials Checklist`` and
``Picnic Essentials``) open nested list blocks, and an optional trailing
``Recommendation:`` sentence singles out one option.  Everything here is pure
and deterministic; malformed input degrades to documented defaults and never
raises.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from functools import reduce
from typing import Dict, List, Tuple

from app.schemas import FinalPlanSections, ParsedPlanOption, ParsedTravelDetails, PlanParseResult
from app.vibes import normalize_vibe

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
_level = os.getenv("VIBE_PLANNER_LOG_LEVEL", "INFO").upper()
logger.setLevel(getattr(logging, _level, logging.INFO))
logger.propagate = False

RECOMMENDATION_LABEL = "Recommendation:"
OPTION_DELIMITER = "---"
FINAL_PLAN_SEPARATOR = "\n\n---\n"
TRAVEL_ESTIMATE_MARKER = "Travel Estimate"
UNDETERMINED = "Could not be determined"

CHECKLIST_HEADING = "Essentials Checklist"
PICNIC_HEADING = "Picnic Essentials"

# Top-level labels and the ParsedPlanOption attribute each one fills.
FIELD_LABELS: Dict[str, str] = {
    "Title": "title",
    "Category": "category",
    "Location": "location",
    "Rating": "rating",
    "Opening Hours": "opening_hours",
    "Description": "description",
    "Cost": "cost",
    "Estimated Ride Cost": "estimated_ride_cost",
    "Weather": "weather",
    "Pro-Tip": "pro_tip",
    "Image URL": "image_url",
}

CHECKLIST_LABELS: Dict[str, str] = {
    "Dress Code": "dress_code",
    "Noise Level": "noise_level",
    "Seating": "seating",
}

TRAVEL_LABELS: Dict[str, str] = {
    "distance": "Distance",
    "travel_time": "Travel Time",
    "traffic": "Traffic",
    "weather": "Weather Forecast",
}

_LEADING_MARKERS = re.compile(r"^[-*]+")
_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_HTTP_URL = re.compile(r"^https?://.+", re.IGNORECASE)


class LineMode(str, Enum):
    DEFAULT = "default"
    CHECKLIST = "checklist"
    PICNIC = "picnic"


def next_line_mode(mode: LineMode, clean_key: str, is_list_item: bool) -> LineMode:
    """Return the mode in effect for a line.

    Any line that is not a list item closes an open sub-block; the two heading
    labels open theirs.  List items keep whatever block is already open.
    """
    if not is_list_item:
        mode = LineMode.DEFAULT
    if clean_key == CHECKLIST_HEADING:
        return LineMode.CHECKLIST
    if clean_key == PICNIC_HEADING:
        return LineMode.PICNIC
    return mode


@dataclass(frozen=True)
class _SegmentState:
    mode: LineMode = LineMode.DEFAULT
    fields: Dict[str, str] = field(default_factory=dict)
    picnic_items: Tuple[str, ...] = ()


def _is_list_item(line: str) -> bool:
    return line.strip().startswith(("-", "*"))


def _split_line(line: str) -> Tuple[str, str]:
    key, _, value = line.partition(":")
    return key, value.strip()


def _clean_key(key: str) -> str:
    return _LEADING_MARKERS.sub("", key.strip()).replace("*", "").strip()


def _consume_line(state: _SegmentState, line: str) -> _SegmentState:
    key, value = _split_line(line)
    if "option" in key.strip().lower():
        return state

    is_list_item = _is_list_item(line)
    clean_key = _clean_key(key)
    clean_value = value.replace("*", "").strip()
    mode = next_line_mode(state.mode, clean_key, is_list_item)

    if clean_key in (CHECKLIST_HEADING, PICNIC_HEADING):
        return replace(state, mode=mode)

    attr = FIELD_LABELS.get(clean_key)
    if attr:
        return replace(state, mode=mode, fields={**state.fields, attr: clean_value})

    if mode is LineMode.CHECKLIST and is_list_item:
        attr = CHECKLIST_LABELS.get(clean_key)
        if attr:
            return replace(state, mode=mode, fields={**state.fields, attr: clean_value})
    elif mode is LineMode.PICNIC and is_list_item:
        item = line.strip()[1:].strip()
        return replace(state, mode=mode, picnic_items=state.picnic_items + (item,))

    return replace(state, mode=mode)


def _make_plan_id(ordinal: int, title: str, location: str) -> str:
    slug = _NON_ALNUM_RUN.sub("-", f"{ordinal}-{title}-{location}".lower())
    return slug.strip("-")


def _resolve_image(raw_url: str | None) -> Tuple[str, str, List[str]]:
    if raw_url is None or not raw_url.strip():
        return "", "fallback", ["Image URL missing; using fallback artwork."]
    if not _HTTP_URL.match(raw_url.strip()):
        return "", "fallback", [f"Image URL '{raw_url}' is not an http(s) link; using fallback artwork."]
    return raw_url.strip(), "external", []


def _parse_segment(segment: str, ordinal: int) -> ParsedPlanOption:
    lines = [line for line in segment.split("\n") if line.strip()]
    state = reduce(_consume_line, lines, _SegmentState())
    fields = state.fields

    raw_category = fields.get("category")
    category = normalize_vibe(raw_category)
    if raw_category and not category:
        logger.debug("Dropping unrecognised category %r for option %d", raw_category, ordinal)

    title = fields.get("title") or "N/A"
    location = fields.get("location") or "N/A"
    image_url, image_status, warnings = _resolve_image(fields.get("image_url"))

    return ParsedPlanOption(
        id=_make_plan_id(ordinal, title, location),
        raw_content=segment,
        title=title,
        image_url=image_url,
        image_status=image_status,
        parse_warnings=warnings,
        category=category,
        location=location,
        rating=fields.get("rating") or "N/A",
        opening_hours=fields.get("opening_hours") or "N/A",
        description=fields.get("description") or "No description available.",
        cost=fields.get("cost") or "N/A",
        pro_tip=fields.get("pro_tip") or "N/A",
        dress_code=fields.get("dress_code") or "N/A",
        noise_level=fields.get("noise_level") or "N/A",
        seating=fields.get("seating") or "N/A",
        picnic_essentials=list(state.picnic_items) or None,
        estimated_ride_cost=fields.get("estimated_ride_cost") or None,
        weather=fields.get("weather") or None,
    )


def parse_plans(content: str) -> PlanParseResult:
    """Parse multi-option plan text into ordered plan records and a recommendation.

    The recommendation runs from the first ``Recommendation:`` label to the end
    of the text and is excluded from the option segments.  Options are the
    trimmed, non-empty pieces between ``---`` delimiters.
    """
    marker_at = content.find(RECOMMENDATION_LABEL)
    if marker_at == -1:
        recommendation = None
        plans_content = content
    else:
        recommendation = content[marker_at:].strip()
        plans_content = content[:marker_at]

    segments = [seg.strip() for seg in plans_content.split(OPTION_DELIMITER)]
    segments = [seg for seg in segments if seg]
    plans = [_parse_segment(seg, idx) for idx, seg in enumerate(segments, 1)]

    logger.debug(
        "Parsed %d plan option(s); recommendation %s",
        len(plans),
        "present" if recommendation else "absent",
    )
    return PlanParseResult(plans=plans, recommendation=recommendation)


def parse_travel_details(content: str) -> ParsedTravelDetails | None:
    """Extract the travel forecast block, or ``None`` when there is no estimate."""
    if not content or TRAVEL_ESTIMATE_MARKER not in content:
        return None

    def _detail(label: str) -> str:
        match = re.search(rf"{re.escape(label)}:[ \t]*([^\n\r]*)", content)
        value = match.group(1).strip() if match else ""
        return value or UNDETERMINED

    return ParsedTravelDetails(**{attr: _detail(label) for attr, label in TRAVEL_LABELS.items()})


def split_final_plan(content: str) -> FinalPlanSections:
    """Split a final plan composite into its plan and travel sections."""
    parts = content.split(FINAL_PLAN_SEPARATOR)
    return FinalPlanSections(
        plan_section=parts[0] or "",
        travel_section=parts[1] if len(parts) > 1 else "",
    )


def build_final_plan(selected_plan: str, travel_text: str) -> str:
    return f"{selected_plan}{FINAL_PLAN_SEPARATOR}{travel_text}"


def get_plan_field(raw_plan: str, key: str) -> str:
    """Return the value of the first ``key:`` line in ``raw_plan`` or ``""``."""
    prefix = f"{key}:"
    for line in raw_plan.split("\n"):
        if line.strip().startswith(prefix):
            return line.replace(prefix, "", 1).strip()
    return ""


def get_title_from_plan(plan_text: str) -> str:
    return get_plan_field(plan_text, "Title") or "Vibe Plan"


def get_destination_from_plan(plan_text: str) -> str | None:
    return get_plan_field(plan_text, "Location") or None


def get_recommended_plan_title(recommendation: str | None) -> str | None:
    # Heuristic: compared to plan titles by exact equality downstream.
    if not recommendation:
        return None
    _, sep, remainder = recommendation.partition(":")
    if not sep:
        return None
    return remainder.strip() or None
