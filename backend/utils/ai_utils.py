"""
Gemini Scoring Utilities
Safety report classification and dynamic keke pricing via the Gemini REST API

Every call degrades to a static fallback when the API key is missing or the
request fails, so callers never have to handle scoring errors.
"""

import json
import logging
from typing import Dict, Optional

import httpx

from config import settings

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SAFETY_CATEGORIES = ["suspicious_activity", "unsafe_area", "hazard", "other"]
RISK_LEVELS = ["low", "medium", "high"]

FALLBACK_PRICE = {
    "base_fare": 400,
    "total_fare": 500,
    "explanation": "Standard rate applied (AI pricing offline)",
}


def fallback_classification(content: str) -> Dict:
    return {"category": "other", "risk_level": "medium", "summary": content}


async def _generate_json(prompt: str, response_schema: Dict) -> Optional[Dict]:
    """
    Call Gemini generateContent asking for a JSON response

    Returns:
        Parsed JSON object, or None on any failure
    """
    if not settings.ai_enabled():
        logger.warning("Gemini API key not configured, using fallback")
        return None

    url = GEMINI_URL.format(model=settings.GEMINI_MODEL)
    payload = {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": response_schema,
        },
    }
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": settings.GEMINI_API_KEY,
    }

    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                url, json=payload, headers=headers, timeout=settings.AI_TIMEOUT_SECONDS
            )

            if response.status_code == 429:
                logger.warning("Gemini API rate limit exceeded, using fallback")
                return None

            if response.status_code != 200:
                logger.warning(
                    f"Gemini API returned {response.status_code}: {response.text}, using fallback"
                )
                return None

            data = response.json()

        text = data["candidates"][0]["content"]["parts"][0]["text"]
        result = json.loads(text)
        if not isinstance(result, dict):
            logger.warning("Gemini API returned a non-object JSON payload, using fallback")
            return None
        return result

    except (KeyError, IndexError, TypeError, ValueError) as e:
        logger.warning(f"Unexpected Gemini API response: {str(e)}, using fallback")
        return None
    except httpx.HTTPError as e:
        logger.warning(f"Gemini API error: {str(e)}, using fallback")
        return None


async def classify_safety_report(content: str) -> Dict:
    """
    Classify a free-text safety report

    Args:
        content: report text written by a passenger or driver

    Returns:
        Dict with category, risk_level and summary
    """
    prompt = (
        f'Classify this safety report: "{content}". '
        f"Options: {', '.join(repr(c) for c in SAFETY_CATEGORIES)}. "
        "Provide risk level (low, medium, high) and a short summary."
    )
    schema = {
        "type": "OBJECT",
        "properties": {
            "category": {"type": "STRING"},
            "risk_level": {"type": "STRING"},
            "summary": {"type": "STRING"},
        },
        "required": ["category", "risk_level", "summary"],
    }

    result = await _generate_json(prompt, schema)
    if not result:
        return fallback_classification(content)

    risk_level = str(result.get("risk_level", "")).lower()
    return {
        "category": result.get("category") or "other",
        "risk_level": risk_level if risk_level in RISK_LEVELS else "medium",
        "summary": result.get("summary") or content,
    }


async def calculate_dynamic_price(
    origin: str, destination: str, time_of_day: str, demand_level: str
) -> Dict:
    """
    Suggest a keke fare in Naira for a corridor

    Args:
        origin, destination: place names
        time_of_day: e.g. "morning rush", "18:30"
        demand_level: low, medium or high

    Returns:
        Dict with base_fare, total_fare, explanation and optionally demand_multiplier
    """
    prompt = (
        f"Calculate a fair Keke price in Naira for a trip from {origin} to {destination} "
        f"at {time_of_day} with {demand_level} demand in Northern Nigeria. "
        "Consider typical corridor rates."
    )
    schema = {
        "type": "OBJECT",
        "properties": {
            "base_fare": {"type": "NUMBER"},
            "demand_multiplier": {"type": "NUMBER"},
            "total_fare": {"type": "NUMBER"},
            "explanation": {"type": "STRING"},
        },
        "required": ["base_fare", "total_fare", "explanation"],
    }

    result = await _generate_json(prompt, schema)
    if not result or "total_fare" not in result:
        return dict(FALLBACK_PRICE)

    return result
