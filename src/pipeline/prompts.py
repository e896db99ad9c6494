# src/pipeline/prompts.py — v1
"""Prompt builders and seed purposes for the three generation calls."""

from __future__ import annotations

PURPOSE_VALIDATE = "validate"
PURPOSE_MATCH = "match"
PURPOSE_ANALYSIS = "analysis"


def build_validation_prompt(city: str, sector: str, country: str) -> str:
    return f"""Validate this user input for a {country.upper()} real-estate query.
City: "{city}"
Locality: "{sector}"

Rules:
1. Return isValid=true when the input looks like a real {country} city and locality, even with minor spelling mistakes or typos.
2. Return isValid=false only when the input is clearly gibberish, random text, or not a place.
3. Keep reason short and user-friendly.
4. Return JSON only."""


def build_ambiguity_prompt(city: str, sector: str, country: str) -> str:
    query = f"{sector} {city}".strip()
    return f"""Determine if the location "{query}" is ambiguous within {country.upper()} only.
Ignore every location outside {country}.
If this locality exists in more than one {country} city, return isAmbiguous=true and list those cities in suggestedCities.
If it is specific, or the city is already clear, return isAmbiguous=false with an empty suggestedCities."""


def build_analysis_prompt(city: str, sector: str, country: str) -> str:
    return f"""Perform a detailed real-estate Market Potential Factor (MPF) analysis for Locality: {sector}, City: {city}, Country: {country.upper()}.

STRICT REQUIREMENT: use {country} context only. All landmarks and infrastructure must be real places near this locality.

Consistency rule: for the same city and locality, always return exactly the same values. Do not vary scores, infrastructure points or labels between requests.

Instructions:
1. Score connectivity, healthcare, education, retail and employment from 0 to 100.
2. overallScore is the weighted sum: connectivity 25%, healthcare 15%, education 15%, retail 15%, employment 15%.
3. label is one of: Excellent, High Growth, Good, Emerging.
4. Include 6-8 key infrastructure points with real names, a category (Metro, Hospital, School, Mall, Park, Office) and distance in km.
5. Return JSON keys: city, sector, overallScore, label, breakdown, infrastructure, summary."""
