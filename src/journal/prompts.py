"""Prompt templates for the journal chat guide, daily insights and air-quality fun facts."""

from datetime import datetime, timezone
from typing import Optional

from dashboard.air_quality import (
    EPA_INDEX_KEY,
    aqi_status,
    extract_air_quality,
    extract_condition,
    extract_location,
    parse_weather_payload,
    to_number,
)

INSIGHT_EXCERPT_LENGTH = 500


class PromptTemplates:
    """Prompts for chat and education features."""

    SYSTEM = """You are a personal well-being guide for an environmental journaling app. You can see the user's journal statistics, air-quality readings (US EPA index 1-6, PM2.5, PM10, NO2, O3 in µg/m³) and excerpts of relevant journal entries.

Answer with specific numbers from the data, not general estimates. Use these thresholds: PM2.5 > 35 µg/m³ is poor, EPA index >= 4 is unhealthy. Be warm and concise."""

    CHAT = """{profile}

{history}RELEVANT JOURNAL EXCERPTS (with mood and air quality):
{journal_context}

QUESTION: {question}

Where possible cite dates, pollutant values and the user's mood on those days, e.g. "Across {total} entries, the worst air was on [date] with PM2.5 [value] µg/m³ and EPA [value]; your mood that day was [value]." Give percentages and patterns from the data available."""

    FUN_FACT = """Give an interesting, educational fact (1-2 sentences) about {subject} with a value of {value}{location}{date}. Use plain language suited to a health and environment journal. Focus on what the value means or its impact and, where possible, add a short tip or positive perspective. Do not use markdown."""

    DAILY_INSIGHT = """The user is feeling '{emotion}'. This journal entry was written on {date}, around {time}.
Short excerpt: "{content}"
At that time the weather in {location} was '{condition}' and the air quality was {air_quality}.

Write one short paragraph (2-4 sentences) that is empathetic and supportive. Gently connect how the user's feeling ('{emotion}') might relate to the weather and air quality at that time, then suggest one simple, calming activity suited to those conditions that can be done indoors. Use warm, friendly language. Do not use markdown, lists or a heading."""

    INSPIRE = """I want to write today's journal but I'm not sure where to start. Here is today's data:
{weather}
My journal so far: "{content}"

Give me 2 simple, warm reflective questions so I can start writing about my feelings, personal experiences or thoughts today, whether about myself, my surroundings, climate change or digital innovation for sustainability. Add 1 easy, personal writing idea. Keep it short, with no markdown or unusual symbols, in friendly language."""

    NO_CONTEXT = "No specific journal context."
    NO_FACT = "No educational information could be generated right now."
    NO_INSIGHT = "The assistant could not produce an insight right now."
    NO_SUGGESTION = "No suggestion was received."


def format_date(created_at: Optional[str]) -> str:
    """``2024-05-03T...`` -> ``3/5/2024`` (day/month/year)."""
    if not created_at:
        return "unknown date"
    try:
        dt = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
    except ValueError:
        return "unknown date"
    return f"{dt.day}/{dt.month}/{dt.year}"


def _aqi_tag(weather_data) -> str:
    air_quality = extract_air_quality(weather_data)
    if not air_quality:
        return ""
    parts = []
    epa = to_number(air_quality.get(EPA_INDEX_KEY))
    if epa:
        parts.append(f"EPA: {epa:g}")
    pm25 = to_number(air_quality.get("pm2_5"))
    if pm25:
        parts.append(f"PM2.5: {pm25:g}µg/m³")
    pm10 = to_number(air_quality.get("pm10"))
    if pm10:
        parts.append(f"PM10: {pm10:g}µg/m³")
    return f" [AQI: {', '.join(parts)}]" if parts else ""


def format_context_chunk(chunk: str, entry: Optional[dict]) -> str:
    """``[date] [Mood: x] [AQI: ...] chunk`` line for the chat prompt."""
    entry = entry or {}
    mood = entry.get("mood_score")
    mood_tag = f" [Mood: {mood:g}]" if mood is not None else ""
    return f"[{format_date(entry.get('created_at'))}]{mood_tag}{_aqi_tag(entry.get('weather_data'))} {chunk}"


def build_profile(analysis: Optional[dict]) -> str:
    """Condensed user profile from ``analyze_journals`` output."""
    if not analysis:
        return "PROFILE: no journal statistics available."

    summary = analysis["summary"]
    counts = summary["moodCounts"]
    lines = [
        f"PROFILE: {summary['total']} entries over {summary['days']} days",
        f"Average mood: {summary['avgMood']} (scale -1 to 1)",
        f"Recent mood (7 days): {summary['recentMood']}",
        f"Pattern: {counts['positive']} positive, {counts['neutral']} neutral, "
        f"{counts['negative']} negative",
    ]

    env = analysis.get("environmental") or {}
    correlations = env.get("correlations") or {}
    if "pm25" in correlations:
        pm25 = correlations["pm25"]
        lines.append(
            f"PM2.5 impact: mood {pm25['lowPM25Mood']} (<=15µg/m³) vs "
            f"{pm25['highPM25Mood']} (>35µg/m³), difference {pm25['impact']}"
        )
        lines.append(
            f"PM2.5 pattern: {pm25['highPM25Days']}/{pm25['totalDays']} high-pollution days "
            f"({pm25['highPM25Percentage']}%), {pm25['lowPM25Days']} clean-air days"
        )
    if "aqi" in correlations:
        aqi = correlations["aqi"]
        lines.append(
            f"AQI impact: mood {aqi['goodAQIMood']} (EPA 1-2) vs {aqi['badAQIMood']} (EPA 4+), "
            f"{aqi['goodDays']} good days vs {aqi['badDays']} bad days"
        )
    if env.get("aqiImpact"):
        detail = ", ".join(
            f"{band}: {data['avgMood']} ({data['count']} days, {data['percentage']}%)"
            for band, data in env["aqiImpact"].items()
        )
        lines.append(f"AQI detail: {detail}")
    if env.get("seasonal"):
        seasons = []
        for season, data in env["seasonal"].items():
            text = f"{season}: mood {data['avgMood']}"
            if data.get("avgPM25"):
                text += f" (PM2.5: {data['avgPM25']}µg/m³)"
            if data.get("avgAQI"):
                text += f" (EPA: {data['avgAQI']})"
            seasons.append(text)
        lines.append(f"Seasonal: {', '.join(seasons)}")
    lines.append(f"Data points: {env.get('dataPoints', 0)} entries with environmental data")
    return "\n".join(lines)


def build_chat_prompt(
    question: str,
    analysis: Optional[dict],
    journal_context: str,
    history: list[dict],
) -> str:
    recent = "\n".join(f"{m['role']}: {m['content']}" for m in history)
    return PromptTemplates.CHAT.format(
        profile=build_profile(analysis),
        history=f"PREVIOUS CHAT:\n{recent}\n\n" if recent else "",
        journal_context=journal_context or PromptTemplates.NO_CONTEXT,
        question=question,
        total=analysis["summary"]["total"] if analysis else "N",
    )


def build_fun_fact_prompt(
    indicator_type: str,
    value,
    unit: Optional[str] = None,
    location_name: Optional[str] = None,
    general_context: Optional[str] = None,
    journal_date: Optional[str] = None,
) -> str:
    date = ""
    if journal_date:
        try:
            dt = datetime.fromisoformat(journal_date.replace("Z", "+00:00"))
            date = f" on {dt.strftime('%d %B %Y').lstrip('0')}"
        except ValueError:
            date = ""
    return PromptTemplates.FUN_FACT.format(
        subject=general_context or indicator_type,
        value=f"{value} {unit}" if unit else f"{value}",
        location=f" in {location_name}" if location_name else "",
        date=date,
    )


def _truncate(text: str, limit: int = INSIGHT_EXCERPT_LENGTH) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def build_daily_insight_prompt(
    content: str,
    emotion: str,
    weather_data,
    created_at: str,
    location_name: Optional[str] = None,
) -> str:
    """Prompt tying one entry's emotion to the weather when it was written.

    Dates render in UTC, e.g. ``Friday, 3 May 2024`` at ``08:00``.
    """
    dt = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)

    location = location_name or (extract_location(weather_data) or {}).get("name")
    return PromptTemplates.DAILY_INSIGHT.format(
        emotion=emotion,
        date=f"{dt.strftime('%A')}, {dt.day} {dt.strftime('%B %Y')}",
        time=dt.strftime("%H:%M"),
        content=_truncate(content),
        location=location or "the user's location",
        condition=(extract_condition(weather_data) or "unknown").lower(),
        air_quality=aqi_status(weather_data),
    )


def build_inspire_prompt(content: Optional[str] = None, weather_data=None) -> str:
    current = (parse_weather_payload(weather_data) or {}).get("current")
    if isinstance(current, dict):
        air_quality = extract_air_quality(weather_data) or {}
        weather = (
            f"Weather: {extract_condition(weather_data) or 'unknown'}, "
            f"Temperature: {current.get('temp_c', 'N/A')}°C, "
            f"Humidity: {current.get('humidity', 'N/A')}%, "
            f"Air quality: {air_quality.get(EPA_INDEX_KEY) or 'N/A'}"
        )
    else:
        weather = "Weather unavailable."
    return PromptTemplates.INSPIRE.format(weather=weather, content=content or "")
