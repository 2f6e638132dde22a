##########################################################################################
#
# Script name: render.py
#
# Description: Console briefing and JSON export for a weather-filtered news feed.
#
##########################################################################################

import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from .config import SENTIMENT_NEGATIVE, SENTIMENT_POSITIVE
from .models import Article, ForecastDay, WeatherReport
from .mood_filter import describe_mood, select_mood_bucket
from .utils import celsius_to_fahrenheit, round_half_up, safe_sentence, utc_now


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

RULE = '-' * 72


# ****************************************************************************************
# Functions
# ****************************************************************************************


def convert_temperature(celsius: float, unit: str) -> int:
    if unit == 'fahrenheit':
        return round_half_up(celsius_to_fahrenheit(celsius))
    return round_half_up(celsius)


def format_temperature(celsius: float, unit: str) -> str:
    suffix = 'F' if unit == 'fahrenheit' else 'C'
    return f'{convert_temperature(celsius, unit)}°{suffix}'


def format_age(published_at: datetime | None, now: datetime | None = None) -> str:
    if published_at is None:
        return ''
    now = now or utc_now()
    hours = int((now - published_at).total_seconds() // 3600)
    if hours < 1:
        return 'Just now'
    if hours < 24:
        return f'{hours}h ago'
    if hours < 48:
        return 'Yesterday'
    return published_at.strftime('%b %d')


def sentiment_marker(sentiment: str | None) -> str:
    if sentiment == SENTIMENT_POSITIVE:
        return '+'
    if sentiment == SENTIMENT_NEGATIVE:
        return '-'
    return '~'


def _render_article(idx: int, article: Article, now: datetime) -> list[str]:
    meta = [part for part in (article.source_name, format_age(article.published_at, now)) if part]
    lines = [f'{idx:>2}. [{sentiment_marker(article.sentiment)}] {article.title}']
    if meta:
        lines.append(f'      {" | ".join(meta)}')
    if article.description:
        lines.append(f'      {safe_sentence(article.description)}')
    return lines


def render_briefing(
    weather: WeatherReport,
    articles: list[Article],
    unit: str = 'celsius',
    forecast: list[ForecastDay] | None = None,
    now: datetime | None = None,
) -> str:
    now = now or utc_now()
    lines = [
        RULE,
        f'{weather.location or "Current location"}: {format_temperature(weather.temperature, unit)} '
        f'{weather.description or weather.condition}'.rstrip(),
        f'Feels like {format_temperature(weather.feels_like, unit)} | '
        f'Humidity {weather.humidity:g}% | Wind {weather.wind_speed:g} m/s',
        describe_mood(weather.temperature),
        RULE,
    ]
    if forecast:
        for day in forecast:
            lines.append(
                f'{day.date}  {format_temperature(day.high, unit)} / {format_temperature(day.low, unit)}  {day.condition}'
            )
        lines.append(RULE)
    if not articles:
        lines.append('No news available.')
    for idx, article in enumerate(articles, start=1):
        lines.extend(_render_article(idx, article, now))
    return '\n'.join(lines) + '\n'


def _article_to_json(article: Article) -> dict:
    payload = asdict(article)
    payload['published_at'] = article.published_at.isoformat() if article.published_at else None
    return payload


def build_payload(
    weather: WeatherReport,
    articles: list[Article],
    unit: str = 'celsius',
    forecast: list[ForecastDay] | None = None,
) -> dict:
    return {
        'generated_at': utc_now().isoformat(),
        'temperature_unit': unit,
        'mood': select_mood_bucket(weather.temperature),
        'mood_label': describe_mood(weather.temperature),
        'weather': {
            **asdict(weather),
            'display_temperature': format_temperature(weather.temperature, unit),
        },
        'forecast': [asdict(day) for day in forecast or []],
        'articles': [_article_to_json(article) for article in articles],
    }


def write_json(
    path: str,
    weather: WeatherReport,
    articles: list[Article],
    unit: str = 'celsius',
    forecast: list[ForecastDay] | None = None,
) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    payload = build_payload(weather, articles, unit=unit, forecast=forecast)
    output.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding='utf-8')
    return output
