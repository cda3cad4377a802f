"""Regression tests for the plan text parser."""

from app.plan_parser import (
    LineMode,
    build_final_plan,
    get_destination_from_plan,
    get_plan_field,
    get_recommended_plan_title,
    get_title_from_plan,
    next_line_mode,
    parse_plans,
    parse_travel_details,
    split_final_plan,
)

TWO_OPTIONS = """OPTION 1
Title: Skybar 25
Image URL: https://example.com/1.jpg
Category: Food & Nightlife
Location: Skybar 25, Villaggio, Accra
Rating: 4.5/5 stars
Opening Hours: 6:00 PM - 1:00 AM
Essentials Checklist:
- Dress Code: Smart Casual
- Noise Level: Lively
- Seating: Private tables
Description: Rooftop drinks with a city view.
Cost: GH₵200
Pro-Tip: Book early.
---
OPTION 2
Title: Sandbox Beach Club
Image URL: https://example.com/2.jpg
Category: Relax & Unwind
Location: Sandbox, Labadi, Accra
Rating: 4.3/5 stars
Opening Hours: 10:00 AM - 10:00 PM
Essentials Checklist:
- Dress Code: Casual
- Noise Level: Moderate
- Seating: Mixed seating
Description: Beachside chill and sunset vibe.
Cost: GH₵120
Pro-Tip: Go before sunset.
---
Recommendation: Pick Skybar 25 for a stronger nightlife vibe."""


def test_parses_plan_options_and_recommendation():
    result = parse_plans(TWO_OPTIONS)

    assert len(result.plans) == 2
    first = result.plans[0]
    assert first.title == "Skybar 25"
    assert "Accra" in first.location
    assert first.category == "Food & Nightlife"
    assert first.image_url == "https://example.com/1.jpg"
    assert first.image_status == "external"
    assert first.parse_warnings == []
    assert first.dress_code == "Smart Casual"
    assert first.noise_level == "Lively"
    assert first.seating == "Private tables"
    assert first.cost == "GH₵200"
    assert result.recommendation == "Recommendation: Pick Skybar 25 for a stronger nightlife vibe."


def test_values_keep_colons_after_the_first():
    plan = parse_plans(TWO_OPTIONS).plans[0]

    assert plan.opening_hours == "6:00 PM - 1:00 AM"
    assert plan.rating == "4.5/5 stars"


def test_spec_example_two_spots():
    text = "Title: Spot X\nLocation: Osu, Accra\n---\nTitle: Spot Y\nLocation: Labadi, Accra\n---\nRecommendation: Go with Spot X."
    result = parse_plans(text)

    assert [plan.title for plan in result.plans] == ["Spot X", "Spot Y"]
    assert result.recommendation == "Recommendation: Go with Spot X."
    assert get_recommended_plan_title(result.recommendation) == "Go with Spot X."


def test_segment_count_matches_delimiters_without_recommendation():
    text = "Title: A\n---\n\n---\nTitle: B\n---   \n---\nTitle: C\n"
    result = parse_plans(text)

    assert len(result.plans) == 3
    assert result.recommendation is None


def test_raw_content_is_trimmed_segment_and_round_trips_title():
    result = parse_plans(TWO_OPTIONS)

    for plan in result.plans:
        assert plan.raw_content == plan.raw_content.strip()
        assert plan.raw_content in TWO_OPTIONS
        assert "Recommendation:" not in plan.raw_content
        assert get_plan_field(plan.raw_content, "Title") == plan.title


def test_parse_is_idempotent_including_ids():
    assert parse_plans(TWO_OPTIONS) == parse_plans(TWO_OPTIONS)
    assert parse_plans(TWO_OPTIONS).plans[0].id == "1-skybar-25-skybar-25-villaggio-accra"


def test_id_collapses_symbols_and_trims_hyphens():
    plan = parse_plans("Title: !!Café & Co!!\nLocation: --Osu--").plans[0]

    assert plan.id == "1-caf-co-osu"


def test_defaults_when_no_field_is_recognised():
    plan = parse_plans("Just some words\nAnother: line").plans[0]

    assert plan.title == "N/A"
    assert plan.category == ""
    assert plan.location == "N/A"
    assert plan.rating == "N/A"
    assert plan.opening_hours == "N/A"
    assert plan.description == "No description available."
    assert plan.cost == "N/A"
    assert plan.pro_tip == "N/A"
    assert plan.dress_code == "N/A"
    assert plan.noise_level == "N/A"
    assert plan.seating == "N/A"
    assert plan.picnic_essentials is None
    assert plan.estimated_ride_cost is None
    assert plan.weather is None
    assert plan.image_url == ""
    assert plan.id == "1-n-a-n-a"


def test_unknown_category_degrades_to_empty():
    plan = parse_plans("Title: Somewhere\nCategory: Chill Vibes Only").plans[0]

    assert plan.category == ""


def test_option_header_lines_are_skipped():
    plan = parse_plans("OPTION 1: Title: Wrong\nTitle: Right").plans[0]

    assert plan.title == "Right"


def test_markers_and_emphasis_are_stripped():
    text = "**Title:** Polo Club\n* Location: **Airport Residential**\n- Cost: *GH₵50*"
    plan = parse_plans(text).plans[0]

    assert plan.title == "Polo Club"
    assert plan.location == "Airport Residential"
    assert plan.cost == "GH₵50"


def test_checklist_example():
    text = "Title: Spot\nEssentials Checklist:\n- Dress Code: Casual\n- Noise Level: Quiet\n- Seating: Outdoor"
    plan = parse_plans(text).plans[0]

    assert plan.dress_code == "Casual"
    assert plan.noise_level == "Quiet"
    assert plan.seating == "Outdoor"


def test_checklist_ignores_unknown_sub_keys_and_closes_on_plain_line():
    text = (
        "Essentials Checklist:\n"
        "- Parking: Plenty\n"
        "Description: Nice.\n"
        "- Seating: Should not count"
    )
    plan = parse_plans(text).plans[0]

    assert plan.seating == "N/A"
    assert plan.description == "Nice."


def test_picnic_items_are_collected_in_order():
    text = "Title: Park\nCategory: Picnic & Parks\nPicnic Essentials:\n- Mat\n* Water: 2 bottles\n- Snacks\nCost: Free"
    plan = parse_plans(text).plans[0]

    assert plan.category == "Picnic & Parks"
    assert plan.picnic_essentials == ["Mat", "Water: 2 bottles", "Snacks"]
    assert plan.cost == "Free"


def test_checklist_keys_inside_picnic_block_are_not_captured():
    text = "Picnic Essentials:\n- Dress Code: Formal\n- Noise Level: Loud\n- Seating: Grass"
    plan = parse_plans(text).plans[0]

    assert plan.dress_code == "N/A"
    assert plan.noise_level == "N/A"
    assert plan.seating == "N/A"
    assert plan.picnic_essentials == ["Dress Code: Formal", "Noise Level: Loud", "Seating: Grass"]


def test_line_mode_does_not_leak_across_options():
    text = "Picnic Essentials:\n- Mat\n---\n- Seating: Outdoor"
    plans = parse_plans(text).plans

    assert plans[0].picnic_essentials == ["Mat"]
    assert plans[1].picnic_essentials is None
    assert plans[1].seating == "N/A"


def test_optional_ride_cost_and_weather():
    plan = parse_plans("Title: X\nEstimated Ride Cost: GH₵40 - GH₵60\nWeather: Sunny, 31°C").plans[0]

    assert plan.estimated_ride_cost == "GH₵40 - GH₵60"
    assert plan.weather == "Sunny, 31°C"


def test_invalid_or_missing_image_url_falls_back():
    invalid = parse_plans("Title: Mystery Spot\nImage URL: not-a-url").plans[0]
    missing = parse_plans("Title: Mystery Spot").plans[0]

    for plan in (invalid, missing):
        assert plan.image_url == ""
        assert plan.image_status == "fallback"
        assert "Image URL" in " ".join(plan.parse_warnings)


def test_empty_and_garbage_input_yield_no_plans():
    assert parse_plans("").plans == []
    assert parse_plans("---\n---\n   ").plans == []


def test_recommendation_without_options():
    result = parse_plans("Recommendation: Stay home.")

    assert result.plans == []
    assert result.recommendation == "Recommendation: Stay home."


def test_next_line_mode_transitions():
    assert next_line_mode(LineMode.DEFAULT, "Essentials Checklist", False) is LineMode.CHECKLIST
    assert next_line_mode(LineMode.CHECKLIST, "Picnic Essentials", False) is LineMode.PICNIC
    assert next_line_mode(LineMode.CHECKLIST, "Dress Code", True) is LineMode.CHECKLIST
    assert next_line_mode(LineMode.PICNIC, "Description", False) is LineMode.DEFAULT
    assert next_line_mode(LineMode.DEFAULT, "Seating", True) is LineMode.DEFAULT


def test_travel_details_require_marker():
    text = "Distance: 5 km\nTravel Time: 20 mins\nTraffic: Light\nWeather Forecast: Sunny"

    assert parse_travel_details(text) is None
    assert parse_travel_details("") is None


def test_travel_details_partial_extraction():
    text = "Title: Travel & Weather Forecast\nTravel Estimate:\nDistance: 7.2 km\nTraffic: Heavy near Circle\n"
    details = parse_travel_details(text)

    assert details is not None
    assert details.distance == "7.2 km"
    assert details.travel_time == "Could not be determined"
    assert details.traffic == "Heavy near Circle"
    assert details.weather == "Could not be determined"


def test_split_final_plan_examples():
    sections = split_final_plan("A\n\n---\nB")
    assert sections.plan_section == "A"
    assert sections.travel_section == "B"

    plain = split_final_plan("just text")
    assert plain.plan_section == "just text"
    assert plain.travel_section == ""

    assert split_final_plan("").plan_section == ""


def test_split_final_plan_ignores_bare_option_delimiter():
    sections = split_final_plan("Title: A\n---\nTitle: B")

    assert sections.plan_section == "Title: A\n---\nTitle: B"
    assert sections.travel_section == ""


def test_build_final_plan_round_trips_through_split():
    composite = build_final_plan("Title: Bistro\nLocation: Osu, Accra", "Title: Travel & Weather Forecast\nTravel Estimate:")
    sections = split_final_plan(composite)

    assert "Title: Bistro" in sections.plan_section
    assert "Travel & Weather Forecast" in sections.travel_section


def test_get_plan_field():
    raw = "Title: Polo Club\n  Location: Polo Club, Airport Residential Area, Accra\nOpening Hours: 8:00 AM - 6:00 PM"

    assert get_plan_field(raw, "Location") == "Polo Club, Airport Residential Area, Accra"
    assert get_plan_field(raw, "Opening Hours") == "8:00 AM - 6:00 PM"
    assert get_plan_field(raw, "Cost") == ""


def test_title_and_destination_helpers():
    raw = "Title: Polo Club\nLocation: Polo Club, Airport Residential Area, Accra"

    assert get_title_from_plan(raw) == "Polo Club"
    assert get_destination_from_plan(raw) == "Polo Club, Airport Residential Area, Accra"
    assert get_title_from_plan("Description: x") == "Vibe Plan"
    assert get_destination_from_plan("Description: x") is None


def test_recommended_title_heuristic():
    assert get_recommended_plan_title(None) is None
    assert get_recommended_plan_title("Recommendation:") is None
    assert get_recommended_plan_title("No colon here") is None
    assert get_recommended_plan_title("Recommendation: Skybar 25") == "Skybar 25"


def test_recommended_title_keeps_later_colons():
    assert get_recommended_plan_title("Recommendation: Go at 7:30") == "Go at 7:30"


def test_field_lookup_does_not_strip_emphasis():
    raw = "**Title:** Polo Club"
    plan = parse_plans(raw).plans[0]

    assert plan.title == "Polo Club"
    assert get_plan_field(raw, "Title") == ""
