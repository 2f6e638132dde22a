##########################################################################################
#
# Script name: mood_filter.py
#
# Description: Picks the news that fits the current temperature.
#
##########################################################################################

from __future__ import annotations

import logging
import math
from numbers import Number

from .config import (
    COLD_BELOW,
    COOL_MAX,
    DEFAULT_LEXICONS,
    FALLBACK_LIMIT,
    HOT_ABOVE,
    MODERATE_LIMIT,
    MOOD_COLD,
    MOOD_COOL,
    MOOD_HOT,
    MOOD_LABELS,
    MOOD_MODERATE,
    RESULT_LIMIT,
    SENTIMENT_NEGATIVE,
    SENTIMENT_NEUTRAL,
    SENTIMENT_POSITIVE,
    Lexicons,
)
from .errors import InvalidTemperatureError
from .models import Article
from .sentiment import classify_articles, contains_keyword


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(__name__)


# ****************************************************************************************
# Functions
# ****************************************************************************************


def validate_temperature(temperature) -> float:
    if isinstance(temperature, (bool, complex)) or not isinstance(temperature, Number):
        raise InvalidTemperatureError(temperature)
    try:
        value = float(temperature)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidTemperatureError(temperature) from exc
    if not math.isfinite(value):
        raise InvalidTemperatureError(temperature)
    return value


def select_mood_bucket(temperature: float) -> str:
    '''
    Map a Celsius temperature to a mood bucket.

    The checks run in a fixed order: cold, hot, cool. Anything above 25 and up
    to 30 matches none of them and is reported as the moderate gap.
    '''
    temperature = validate_temperature(temperature)
    if temperature < COLD_BELOW:
        return MOOD_COLD
    if temperature > HOT_ABOVE:
        return MOOD_HOT
    if COLD_BELOW <= temperature <= COOL_MAX:
        return MOOD_COOL
    return MOOD_MODERATE


def describe_mood(temperature: float) -> str:
    return MOOD_LABELS[select_mood_bucket(temperature)]


def _with_sentiment(articles: list[Article], sentiment: str) -> list[Article]:
    return [article for article in articles if article.sentiment == sentiment]


def _select_cold(classified: list[Article], lexicons: Lexicons) -> list[Article]:
    primary = [
        article
        for article in classified
        if contains_keyword(article.text(), lexicons.depressing) or article.sentiment == SENTIMENT_NEGATIVE
    ]
    if primary:
        return primary
    log.debug('No depressing news, falling back to neutral articles.')
    return _with_sentiment(classified, SENTIMENT_NEUTRAL)[:FALLBACK_LIMIT]


def _select_hot(classified: list[Article], lexicons: Lexicons) -> list[Article]:
    primary = [article for article in classified if contains_keyword(article.text(), lexicons.fear)]
    if primary:
        return primary
    log.debug('No fear-related news, falling back to negative articles.')
    return _with_sentiment(classified, SENTIMENT_NEGATIVE)[:FALLBACK_LIMIT]


def _select_cool(classified: list[Article], lexicons: Lexicons) -> list[Article]:
    primary = [
        article
        for article in classified
        if article.sentiment == SENTIMENT_POSITIVE or contains_keyword(article.text(), lexicons.positive)
    ]
    if primary:
        return primary
    log.debug('No positive news, falling back to neutral articles.')
    return _with_sentiment(classified, SENTIMENT_NEUTRAL)[:FALLBACK_LIMIT]


BUCKET_SELECTORS = {
    MOOD_COLD: _select_cold,
    MOOD_HOT: _select_hot,
    MOOD_COOL: _select_cool,
}


def filter_by_weather(
    articles: list[Article] | None,
    temperature: float,
    lexicons: Lexicons = DEFAULT_LEXICONS,
) -> list[Article]:
    '''
    Tag every article with a sentiment and keep the ones that suit the weather.

    Input:
        articles: candidate articles, in display order. Not modified.
        temperature: current temperature in degrees Celsius.
        lexicons: keyword sets used for tagging and matching.

    Output:
        Tagged copies of the selected articles in their original relative
        order, at most 20 of them (15 in the moderate gap). Empty only when
        the input is empty.

    Raises:
        InvalidTemperatureError if the temperature is not a finite number.
    '''
    if not articles:
        return []

    bucket = select_mood_bucket(temperature)
    classified = classify_articles(articles, lexicons)

    if bucket == MOOD_MODERATE:
        selected = classified[:MODERATE_LIMIT]
    else:
        selected = BUCKET_SELECTORS[bucket](classified, lexicons)
        if not selected:
            log.debug('Bucket %s fallback empty, using the first %d articles.', bucket, FALLBACK_LIMIT)
            selected = classified[:FALLBACK_LIMIT]

    if not selected:
        selected = classified[:FALLBACK_LIMIT]

    result = selected[:RESULT_LIMIT]
    log.debug(
        'Weather filter: temperature=%s bucket=%s input=%d output=%d',
        temperature,
        bucket,
        len(articles),
        len(result),
    )
    return result
