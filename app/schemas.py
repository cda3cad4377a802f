from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Field names are snake_case in Python and camelCase on the wire, matching
# what the web client already renders.
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# ------- Parser output -------
class ParsedPlanOption(CamelModel):
    id: str
    raw_content: str
    title: str = "N/A"
    image_url: str = ""
    image_status: Literal["external", "fallback"] = "fallback"
    parse_warnings: List[str] = Field(default_factory=list)
    category: str = ""
    location: str = "N/A"
    rating: str = "N/A"
    opening_hours: str = "N/A"
    description: str = "No description available."
    cost: str = "N/A"
    pro_tip: str = "N/A"
    dress_code: str = "N/A"
    noise_level: str = "N/A"
    seating: str = "N/A"
    picnic_essentials: Optional[List[str]] = None
    estimated_ride_cost: Optional[str] = None
    weather: Optional[str] = None

class PlanParseResult(CamelModel):
    plans: List[ParsedPlanOption] = Field(default_factory=list)
    recommendation: Optional[str] = None

class ParsedTravelDetails(CamelModel):
    distance: str
    travel_time: str
    traffic: str
    weather: str

class FinalPlanSections(CamelModel):
    plan_section: str = ""
    travel_section: str = ""

# ------- Presentation -------
class RecommendationSignals(CamelModel):
    budget_fit: Literal["fit", "above", "unknown"] = "unknown"
    open_likelihood: Literal["high", "medium", "low"] = "low"
    distance_confidence: Literal["high", "medium", "low", "unknown"] = "unknown"

class PlanCardView(CamelModel):
    id: str
    title: str
    location: str
    category: str
    image_url: str
    image_status: Literal["external", "fallback"]
    is_recommended: bool = False
    map_url: str = ""
    ride_url: str = ""
    recommendation_signals: RecommendationSignals = Field(default_factory=RecommendationSignals)

class FinalPlanView(CamelModel):
    content: str
    plan: Optional[ParsedPlanOption] = None
    card: Optional[PlanCardView] = None
    travel_details: Optional[ParsedTravelDetails] = None
    sections: FinalPlanSections

class SavedPlan(CamelModel):
    id: str
    plan_content: str
    saved_at: str
    rating: Optional[int] = Field(None, ge=1, le=5)

# ------- Request models -------
class Coordinates(BaseModel):
    latitude: float
    longitude: float

class HangoutParams(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    planning_mode: Literal["", "quick", "detailed"] = ""
    vibe: str = ""
    time_window: str = ""
    budget: str = ""
    audience: str = ""
    timing: str = ""
    location: Optional[Coordinates] = None
    proximity: Literal["any", "close"] = "any"
    date_meal: str = ""
    specific_date_time: str = ""
    group_size: Optional[int] = None
    travel_preference: str = ""
    must_haves: List[str] = Field(default_factory=list)
    open_now_only: bool = False

class PlanTextRequest(CamelModel):
    content: str

class PlanFieldRequest(CamelModel):
    raw_plan: str
    key: str

class FinalizeRequest(CamelModel):
    selected_plan: str
    origin: str
    intended_time: str
    origin_coords: Optional[Coordinates] = None

class CalendarRequest(CamelModel):
    content: str
    specific_date_time: str = ""
    time_window: str = ""

class ShareRequest(CamelModel):
    content: str
    is_final: bool = False

class RatingRequest(CamelModel):
    rating: int = Field(..., ge=1, le=5)
