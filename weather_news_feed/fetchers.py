##########################################################################################
#
# Script name: fetchers.py
#
# Description: Fetches current weather and forecasts from OpenWeatherMap and top headlines
#              from NewsAPI, and normalizes them into feed models.
#
##########################################################################################

import logging
from datetime import timedelta

import requests

from .config import (
    FORECAST_DAYS,
    NEWS_PAGE_SIZE,
    http_timeout,
    news_api_base_url,
    require_api_key,
    weather_api_base_url,
)
from .errors import FetchError
from .models import Article, ForecastDay, WeatherReport
from .utils import canonicalize_url, parse_timestamp, round_half_up, stable_id, strip_html, utc_now


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)
USER_AGENT = 'weather-news-feed/1.0'
REMOVED_PLACEHOLDER = '[Removed]'


# ****************************************************************************************
# Functions
# ****************************************************************************************


def _get_json(session, url: str, params: dict, headers: dict | None = None, error_message: str = '') -> dict:
    http = session or requests
    request_headers = {'User-Agent': USER_AGENT}
    request_headers.update(headers or {})
    try:
        response = http.get(url, params=params, headers=request_headers, timeout=http_timeout())
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        log.warning('%s (%s): %s', error_message, url, exc)
        raise FetchError(error_message, url=url) from exc
    if not isinstance(payload, dict):
        raise FetchError(error_message, url=url)
    return payload


def _weather_params(lat: float, lon: float, api_key: str) -> dict:
    return {'lat': lat, 'lon': lon, 'appid': api_key, 'units': 'metric'}


def fetch_current_weather(lat: float, lon: float, api_key: str | None = None, session=None) -> WeatherReport:
    api_key = require_api_key('OPENWEATHER_API_KEY', api_key)
    url = f'{weather_api_base_url()}/weather'
    error_message = 'Failed to fetch weather data'
    data = _get_json(session, url, _weather_params(lat, lon, api_key), error_message=error_message)
    try:
        main = data['main']
        weather = data['weather'][0]
        report = WeatherReport(
            location=data.get('name') or '',
            temperature=round_half_up(float(main['temp'])),
            condition=weather.get('main', ''),
            description=weather.get('description', ''),
            icon=weather.get('icon', ''),
            humidity=float(main.get('humidity', 0)),
            wind_speed=float((data.get('wind') or {}).get('speed', 0)),
            feels_like=round_half_up(float(main.get('feels_like', main['temp']))),
        )
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise FetchError(error_message, url=url) from exc
    log.debug('Weather for %s: %s°C, %s', report.location, report.temperature, report.condition)
    return report


def fetch_forecast(lat: float, lon: float, api_key: str | None = None, session=None) -> list[ForecastDay]:
    api_key = require_api_key('OPENWEATHER_API_KEY', api_key)
    url = f'{weather_api_base_url()}/forecast'
    error_message = 'Failed to fetch forecast data'
    data = _get_json(session, url, _weather_params(lat, lon, api_key), error_message=error_message)

    # 3-hourly entries grouped by calendar day, in the order the API returns them.
    by_day: dict[str, list[dict]] = {}
    try:
        for item in data['list']:
            day = item['dt_txt'].split(' ')[0]
            by_day.setdefault(day, []).append(item)

        forecast: list[ForecastDay] = []
        for day, items in list(by_day.items())[:FORECAST_DAYS]:
            temps = [float(item['main']['temp']) for item in items]
            first = items[0]['weather'][0]
            forecast.append(
                ForecastDay(
                    date=day,
                    high=round_half_up(max(temps)),
                    low=round_half_up(min(temps)),
                    condition=first.get('main', ''),
                    icon=first.get('icon', ''),
                )
            )
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
        raise FetchError(error_message, url=url) from exc
    return forecast


def _make_article(item: dict, category: str) -> Article | None:
    title = strip_html(item.get('title') or '')
    if not title or title == REMOVED_PLACEHOLDER:
        return None
    url = canonicalize_url((item.get('url') or '').strip())
    source = item.get('source') or {}
    return Article(
        id=stable_id(url or title, title),
        title=title,
        description=strip_html(item.get('description') or ''),
        url=url,
        url_to_image=item.get('urlToImage') or '',
        published_at=parse_timestamp(item.get('publishedAt')),
        source_name=source.get('name') or 'Unknown',
        category=category,
    )


def fetch_news(
    categories: list[str],
    api_key: str | None = None,
    page_size: int = NEWS_PAGE_SIZE,
    session=None,
) -> list[Article]:
    api_key = require_api_key('NEWS_API_KEY', api_key)
    url = f'{news_api_base_url()}/top-headlines'
    articles: list[Article] = []
    seen: set[str] = set()
    for category in categories:
        data = _get_json(
            session,
            url,
            params={'category': category, 'pageSize': page_size},
            headers={'X-Api-Key': api_key},
            error_message='Failed to fetch news data',
        )
        if data.get('status') == 'error':
            log.warning('NewsAPI error for category=%s: %s', category, data.get('message'))
            raise FetchError('Failed to fetch news data', url=url)
        items = data.get('articles') or []
        kept = 0
        for item in items:
            if not isinstance(item, dict):
                continue
            article = _make_article(item, category)
            if article is None or article.id in seen:
                continue
            seen.add(article.id)
            articles.append(article)
            kept += 1
        log.debug('Fetched %d article(s) for category=%s (%d kept).', len(items), category, kept)
    return articles


def build_sample_weather(temperature: float = 18, location: str = 'Sample City') -> WeatherReport:
    return WeatherReport(
        location=location,
        temperature=temperature,
        condition='Clouds',
        description='scattered clouds',
        icon='03d',
        humidity=60.0,
        wind_speed=3.5,
        feels_like=round_half_up(temperature),
    )


def build_sample_articles() -> list[Article]:
    now = utc_now()
    templates = [
        ('Storm disaster leaves coastal towns in crisis', 'general'),
        ('Health officials issue outbreak warning ahead of summer', 'health'),
        ('Local team wins championship after stunning comeback', 'sports'),
        ('Startup unveils breakthrough battery innovation', 'technology'),
        ('City council approves new library opening hours', 'general'),
        ('Researchers publish survey of regional bird migration', 'science'),
        ('Markets brace for recession as unemployment rises', 'business'),
        ('Film festival opens with a joyful celebration', 'entertainment'),
    ]
    articles: list[Article] = []
    for idx in range(24):
        title, category = templates[idx % len(templates)]
        url = f'https://example.com/news-{idx}'
        article = Article(
            id=stable_id(url, title),
            title=f'{title} ({idx + 1})',
            description=f'Sample {category} story.',
            url=url,
            published_at=now - timedelta(hours=idx),
            source_name='Sample Source',
            category=category,
        )
        articles.append(article)
    return articles
