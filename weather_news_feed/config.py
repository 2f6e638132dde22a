##########################################################################################
#
# Script name: config.py
#
# Description: Static keyword lexicons, mood thresholds and runtime settings for the
#              weather-driven news feed.
#
##########################################################################################

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import ConfigError
from .models import Settings


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Lexicons:
    depressing: frozenset[str]
    fear: frozenset[str]
    positive: frozenset[str]

    @property
    def negative(self) -> frozenset[str]:
        return self.depressing | self.fear


DEPRESSING_KEYWORDS = frozenset({
    'death',
    'disaster',
    'crisis',
    'tragedy',
    'accident',
    'violence',
    'crime',
    'war',
    'conflict',
    'recession',
    'unemployment',
    'poverty',
})

FEAR_KEYWORDS = frozenset({
    'danger',
    'threat',
    'warning',
    'alert',
    'emergency',
    'risk',
    'hazard',
    'terror',
    'attack',
    'epidemic',
    'pandemic',
    'outbreak',
})

POSITIVE_KEYWORDS = frozenset({
    'win',
    'victory',
    'success',
    'achievement',
    'celebration',
    'joy',
    'happiness',
    'breakthrough',
    'progress',
    'innovation',
    'award',
    'champion',
})

DEFAULT_LEXICONS = Lexicons(
    depressing=DEPRESSING_KEYWORDS,
    fear=FEAR_KEYWORDS,
    positive=POSITIVE_KEYWORDS,
)

SENTIMENT_POSITIVE = 'positive'
SENTIMENT_NEGATIVE = 'negative'
SENTIMENT_NEUTRAL = 'neutral'

MOOD_COLD = 'cold'
MOOD_HOT = 'hot'
MOOD_COOL = 'cool'
MOOD_MODERATE = 'moderate'

MOOD_LABELS = {
    MOOD_COLD: 'Cold Weather',
    MOOD_HOT: 'Hot Weather',
    MOOD_COOL: 'Cool Weather',
    MOOD_MODERATE: 'Moderate Weather',
}

# Temperatures are degrees Celsius.
COLD_BELOW = 10
HOT_ABOVE = 30
COOL_MAX = 25

FALLBACK_LIMIT = 10
MODERATE_LIMIT = 15
RESULT_LIMIT = 20

TEMPERATURE_UNITS = ('celsius', 'fahrenheit')

AVAILABLE_CATEGORIES = [
    'general',
    'business',
    'entertainment',
    'health',
    'science',
    'sports',
    'technology',
]

DEFAULT_CATEGORIES = ['general', 'technology', 'health']
DEFAULT_SETTINGS_FILE = 'config/settings.yaml'

DEFAULT_NEWS_API_BASE_URL = 'https://newsapi.org/v2'
DEFAULT_WEATHER_API_BASE_URL = 'https://api.openweathermap.org/data/2.5'
DEFAULT_HTTP_TIMEOUT = 15.0
NEWS_PAGE_SIZE = 50
FORECAST_DAYS = 5


# ****************************************************************************************
# Functions
# ****************************************************************************************


def news_api_base_url() -> str:
    return (os.getenv('NEWS_API_BASE_URL') or DEFAULT_NEWS_API_BASE_URL).rstrip('/')


def weather_api_base_url() -> str:
    return (os.getenv('WEATHER_API_BASE_URL') or DEFAULT_WEATHER_API_BASE_URL).rstrip('/')


def http_timeout() -> float:
    raw = os.getenv('HTTP_TIMEOUT_SECONDS')
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        log.warning('Ignoring invalid HTTP_TIMEOUT_SECONDS=%r', raw)
        return DEFAULT_HTTP_TIMEOUT


def require_api_key(env_name: str, explicit: str | None = None) -> str:
    api_key = explicit or os.getenv(env_name)
    if not api_key:
        raise ConfigError(f'{env_name} is not set.')
    return api_key


def _keyword_set(payload: dict, key: str, default: frozenset[str]) -> frozenset[str]:
    if key not in payload:
        return default
    values = payload[key]
    if not isinstance(values, list):
        raise ConfigError(f'lexicons.{key} must be a list')
    keywords = {str(value).strip().lower() for value in values}
    keywords.discard('')
    return frozenset(keywords)


def build_lexicons(payload: dict | None) -> Lexicons:
    '''
    Build a Lexicons instance from a mapping of keyword lists.

    Keys that are absent keep the default lexicon. The three sets must stay
    disjoint, otherwise a keyword would count for both sides of the classifier.
    '''
    payload = payload or {}
    if not isinstance(payload, dict):
        raise ConfigError('lexicons must be a mapping')
    lexicons = Lexicons(
        depressing=_keyword_set(payload, 'depressing', DEPRESSING_KEYWORDS),
        fear=_keyword_set(payload, 'fear', FEAR_KEYWORDS),
        positive=_keyword_set(payload, 'positive', POSITIVE_KEYWORDS),
    )
    overlap = (
        (lexicons.depressing & lexicons.fear)
        | (lexicons.depressing & lexicons.positive)
        | (lexicons.fear & lexicons.positive)
    )
    if overlap:
        raise ConfigError(f'lexicons must be disjoint, shared keywords: {", ".join(sorted(overlap))}')
    return lexicons


def _read_yaml(path: str):
    try:
        with open(path, 'r', encoding='utf-8') as handle:
            return yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigError(f'Cannot read {path}: {exc}') from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid YAML in {path}: {exc}') from exc


def load_lexicons(path: str) -> Lexicons:
    payload = _read_yaml(path)
    if not isinstance(payload, dict):
        raise ConfigError(f'{path} must contain a mapping')
    lexicons = build_lexicons(payload.get('lexicons', payload))
    log.debug(
        'Loaded lexicons from %s (depressing=%d, fear=%d, positive=%d).',
        path,
        len(lexicons.depressing),
        len(lexicons.fear),
        len(lexicons.positive),
    )
    return lexicons


def _parse_categories(raw) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split(',')
    if not isinstance(raw, list):
        raise ConfigError('news_categories must be a list')
    categories = [str(item).strip().lower() for item in raw if str(item).strip()]
    if not categories:
        raise ConfigError('At least one news category is required.')
    unknown = [item for item in categories if item not in AVAILABLE_CATEGORIES]
    if unknown:
        raise ConfigError(f'Unknown news categories: {", ".join(unknown)}')
    return categories


def _parse_unit(raw) -> str:
    unit = str(raw or 'celsius').strip().lower()
    if unit not in TEMPERATURE_UNITS:
        raise ConfigError(f'temperature_unit must be one of {TEMPERATURE_UNITS}, got {raw!r}')
    return unit


def build_settings(
    temperature_unit=None,
    news_categories=None,
    latitude: float | None = None,
    longitude: float | None = None,
    lexicons_file: str | None = None,
) -> Settings:
    return Settings(
        temperature_unit=_parse_unit(temperature_unit),
        news_categories=_parse_categories(DEFAULT_CATEGORIES if news_categories is None else news_categories),
        latitude=None if latitude is None else float(latitude),
        longitude=None if longitude is None else float(longitude),
        lexicons_file=lexicons_file,
    )


def load_settings(path: str = DEFAULT_SETTINGS_FILE) -> Settings:
    if not Path(path).exists():
        log.debug('Settings file %s not found, using defaults.', path)
        return build_settings()
    payload = _read_yaml(path)
    if not isinstance(payload, dict):
        raise ConfigError(f'{path} must contain a mapping')
    location = payload.get('location') or {}
    if not isinstance(location, dict):
        raise ConfigError('location must be a mapping with latitude and longitude')
    lexicons_file = payload.get('lexicons')
    if lexicons_file and not os.path.isabs(lexicons_file):
        lexicons_file = str(Path(path).parent / lexicons_file)
    try:
        return build_settings(
            temperature_unit=payload.get('temperature_unit'),
            news_categories=payload.get('news_categories'),
            latitude=location.get('latitude'),
            longitude=location.get('longitude'),
            lexicons_file=lexicons_file,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f'Invalid settings in {path}: {exc}') from exc
