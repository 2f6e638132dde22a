##########################################################################################
#
# Script name: test_fetchers.py
#
# Description: Weather and news client tests against a stubbed HTTP session.
#
##########################################################################################

from datetime import datetime, timezone

import pytest
import requests

from weather_news_feed.errors import ConfigError, FetchError
from weather_news_feed.fetchers import (
    build_sample_articles,
    fetch_current_weather,
    fetch_forecast,
    fetch_news,
)


class FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f'{self.status_code} Server Error')

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    def __init__(self, *responses: FakeResponse) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'params': params, 'headers': headers, 'timeout': timeout})
        return self.responses.pop(0)


WEATHER_PAYLOAD = {
    'name': 'London',
    'main': {'temp': 24.5, 'feels_like': 23.4, 'humidity': 70},
    'weather': [{'main': 'Clouds', 'description': 'broken clouds', 'icon': '04d'}],
    'wind': {'speed': 4.1},
}


@pytest.fixture(autouse=True)
def _api_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('OPENWEATHER_API_KEY', 'weather-key')
    monkeypatch.setenv('NEWS_API_KEY', 'news-key')
    monkeypatch.delenv('NEWS_API_BASE_URL', raising=False)
    monkeypatch.delenv('WEATHER_API_BASE_URL', raising=False)
    monkeypatch.delenv('HTTP_TIMEOUT_SECONDS', raising=False)


def test_fetch_current_weather_maps_payload() -> None:
    session = FakeSession(FakeResponse(WEATHER_PAYLOAD))
    report = fetch_current_weather(51.5, -0.12, session=session)

    assert report.location == 'London'
    assert report.temperature == 25
    assert report.feels_like == 23
    assert report.condition == 'Clouds'
    assert report.description == 'broken clouds'
    assert report.humidity == 70.0
    assert report.wind_speed == 4.1

    call = session.calls[0]
    assert call['url'] == 'https://api.openweathermap.org/data/2.5/weather'
    assert call['params'] == {'lat': 51.5, 'lon': -0.12, 'appid': 'weather-key', 'units': 'metric'}
    assert call['timeout'] == 15.0


def test_fetch_current_weather_wraps_http_errors() -> None:
    session = FakeSession(FakeResponse({}, status_code=500))
    with pytest.raises(FetchError) as excinfo:
        fetch_current_weather(1, 2, session=session)
    assert str(excinfo.value) == 'Failed to fetch weather data'
    assert isinstance(excinfo.value.__cause__, requests.HTTPError)


def test_fetch_current_weather_rejects_malformed_payload() -> None:
    session = FakeSession(FakeResponse({'name': 'Nowhere', 'weather': []}))
    with pytest.raises(FetchError):
        fetch_current_weather(1, 2, session=session)


def test_fetch_current_weather_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('OPENWEATHER_API_KEY')
    with pytest.raises(ConfigError):
        fetch_current_weather(1, 2, session=FakeSession())


def _forecast_entry(day: str, hour: str, temp: float, condition: str) -> dict:
    return {
        'dt_txt': f'{day} {hour}',
        'main': {'temp': temp},
        'weather': [{'main': condition, 'icon': '01d'}],
    }


def test_fetch_forecast_groups_by_day() -> None:
    entries = [
        _forecast_entry('2026-10-18', '12:00:00', 10.4, 'Rain'),
        _forecast_entry('2026-10-18', '15:00:00', 15.6, 'Clear'),
    ]
    for offset in range(19, 24):
        entries.append(_forecast_entry(f'2026-10-{offset}', '09:00:00', float(offset), 'Clouds'))
    session = FakeSession(FakeResponse({'list': entries}))

    forecast = fetch_forecast(51.5, -0.12, session=session)

    assert [day.date for day in forecast] == [
        '2026-10-18',
        '2026-10-19',
        '2026-10-20',
        '2026-10-21',
        '2026-10-22',
    ]
    assert forecast[0].high == 16
    assert forecast[0].low == 10
    assert forecast[0].condition == 'Rain'
    assert session.calls[0]['url'].endswith('/forecast')


def test_fetch_forecast_wraps_bad_json() -> None:
    session = FakeSession(FakeResponse(ValueError('not json')))
    with pytest.raises(FetchError) as excinfo:
        fetch_forecast(1, 2, session=session)
    assert str(excinfo.value) == 'Failed to fetch forecast data'


def _news_item(title, url, description=None, source='Example News', published='2026-10-18T08:30:00Z') -> dict:
    return {
        'title': title,
        'url': url,
        'description': description,
        'urlToImage': None,
        'publishedAt': published,
        'source': {'id': None, 'name': source},
    }


def test_fetch_news_maps_and_dedupes_articles() -> None:
    general = {
        'status': 'ok',
        'articles': [
            _news_item('Storm warning for the coast', 'https://example.com/storm?utm_source=x', 'Stay safe'),
            _news_item('[Removed]', 'https://removed.example.com'),
            _news_item(None, 'https://example.com/untitled'),
            _news_item('Team wins final', 'https://example.com/final'),
        ],
    }
    sports = {
        'status': 'ok',
        'articles': [
            _news_item('Team wins final', 'https://example.com/final'),
            _news_item('Record crowd at marathon', 'https://example.com/marathon', published='garbage'),
        ],
    }
    session = FakeSession(FakeResponse(general), FakeResponse(sports))

    articles = fetch_news(['general', 'sports'], session=session)

    assert [article.title for article in articles] == [
        'Storm warning for the coast',
        'Team wins final',
        'Record crowd at marathon',
    ]
    first = articles[0]
    assert first.url == 'https://example.com/storm'
    assert first.description == 'Stay safe'
    assert first.source_name == 'Example News'
    assert first.category == 'general'
    assert first.sentiment is None
    assert first.published_at == datetime(2026, 10, 18, 8, 30, tzinfo=timezone.utc)
    assert articles[1].description == ''
    assert articles[1].category == 'general'
    assert articles[2].category == 'sports'
    assert articles[2].published_at is None
    assert len({article.id for article in articles}) == 3

    assert session.calls[0]['params'] == {'category': 'general', 'pageSize': 50}
    assert session.calls[0]['headers']['X-Api-Key'] == 'news-key'
    assert session.calls[1]['params']['category'] == 'sports'


def test_fetch_news_honours_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('NEWS_API_BASE_URL', 'https://news.test/v2/')
    session = FakeSession(FakeResponse({'status': 'ok', 'articles': []}))
    assert fetch_news(['general'], session=session) == []
    assert session.calls[0]['url'] == 'https://news.test/v2/top-headlines'


def test_fetch_news_raises_on_api_error() -> None:
    session = FakeSession(FakeResponse({'status': 'error', 'code': 'apiKeyInvalid', 'message': 'bad key'}))
    with pytest.raises(FetchError) as excinfo:
        fetch_news(['general'], session=session)
    assert str(excinfo.value) == 'Failed to fetch news data'


def test_fetch_news_wraps_connection_errors() -> None:
    class BrokenSession:
        def get(self, *args, **kwargs):
            raise requests.ConnectionError('offline')

    with pytest.raises(FetchError) as excinfo:
        fetch_news(['general'], session=BrokenSession())
    assert excinfo.value.url == 'https://newsapi.org/v2/top-headlines'


def test_build_sample_articles_have_unique_ids() -> None:
    articles = build_sample_articles()
    assert len(articles) == 24
    assert len({article.id for article in articles}) == 24
    assert all(article.title and article.sentiment is None for article in articles)
