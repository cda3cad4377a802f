from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ValidationError

from app import config
from app.orchestrator import (
    GenerationError,
    MissingDestinationError,
    describe_final_plan,
    describe_options,
    finalize_plan,
    generate_options,
    get_history,
)
from app.plan_parser import get_plan_field, parse_plans
from app.plan_views import build_calendar_link, build_share_text
from app.schemas import (
    CalendarRequest,
    FinalizeRequest,
    HangoutParams,
    PlanFieldRequest,
    PlanTextRequest,
    RatingRequest,
    ShareRequest,
)

app = FastAPI(title="Vibe Planner API")

# Allow the web client (dev server or static build) to reach the API.
# Operators can scope this via VIBE_PLANNER_ALLOWED_ORIGINS.
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: Type[ModelT], payload: Dict[str, Any]) -> ModelT:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False)) from exc


@app.post("/api/plans/parse")
async def api_parse_plans(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    """Parse option text the client already holds (history, regenerate)."""
    req = _validate(PlanTextRequest, payload)
    return describe_options(req.content)


@app.post("/api/plans/final/parse")
async def api_parse_final_plan(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(PlanTextRequest, payload)
    return describe_final_plan(req.content).model_dump(mode="json", by_alias=True)


@app.post("/api/plans/field")
async def api_plan_field(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(PlanFieldRequest, payload)
    return {"key": req.key, "value": get_plan_field(req.raw_plan, req.key)}


@app.post("/api/plans/generate")
async def api_generate(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    params = _validate(HangoutParams, payload)
    try:
        return await generate_options(params)
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@app.post("/api/plans/finalize")
async def api_finalize(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(FinalizeRequest, payload)
    try:
        view = await finalize_plan(req.selected_plan, req.origin, req.intended_time, req.origin_coords)
    except MissingDestinationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return view.model_dump(mode="json", by_alias=True)


@app.post("/api/plans/calendar")
async def api_calendar(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(CalendarRequest, payload)
    url = build_calendar_link(parse_plans(req.content), req.specific_date_time, req.time_window)
    if url is None:
        raise HTTPException(status_code=422, detail="No plan found to add to the calendar.")
    return {"url": url}


@app.post("/api/plans/share")
async def api_share(payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(ShareRequest, payload)
    text = build_share_text(req.content, req.is_final)
    if text is None:
        raise HTTPException(status_code=422, detail="Not enough plan options to share.")
    return {"text": text}


@app.get("/api/history")
async def api_history() -> List[Dict[str, Any]]:
    return [entry.model_dump(mode="json", by_alias=True) for entry in get_history().entries()]


@app.post("/api/history/{entry_id}/rating")
async def api_rate_history(entry_id: str, payload: Dict[str, Any] = Body(...)) -> Dict[str, Any]:
    req = _validate(RatingRequest, payload)
    entry = get_history().rate(entry_id, req.rating)
    if entry is None:
        raise HTTPException(status_code=404, detail="No saved plan with that id.")
    return entry.model_dump(mode="json", by_alias=True)


@app.delete("/api/history")
async def api_clear_history() -> Dict[str, Any]:
    get_history().clear()
    return {"cleared": True}
