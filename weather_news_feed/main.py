##########################################################################################
#
# Script name: main.py
#
# Description: CLI entrypoint that fetches the weather and headlines and prints the news
#              that suits the current temperature.
#
##########################################################################################

import argparse
import logging
import os
import sys
from dataclasses import replace
from datetime import date

from .config import DEFAULT_LEXICONS, DEFAULT_SETTINGS_FILE, TEMPERATURE_UNITS, build_settings, load_lexicons, load_settings
from .errors import ConfigError, Error
from .fetchers import build_sample_articles, build_sample_weather, fetch_current_weather, fetch_forecast, fetch_news
from .models import Settings
from .mood_filter import filter_by_weather, select_mood_bucket
from .render import render_briefing, write_json
from .utils import fahrenheit_to_celsius


# ****************************************************************************************
# Global data and configuration
# ****************************************************************************************

log = logging.getLogger(os.path.basename(sys.argv[0]))
log.setLevel(logging.DEBUG)
log.propagate = False
formatter = logging.Formatter(
    '%(asctime)-15s [%(funcName)25s:%(lineno)-5s] %(levelname)-8s %(message)s'
)

root_log = logging.getLogger()
root_log.setLevel(logging.DEBUG)

LOG_FILE = 'weather_news_feed.log'
console_handler = None


# ****************************************************************************************
# Functions
# ****************************************************************************************


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    return build_settings(
        temperature_unit=args.unit or settings.temperature_unit,
        news_categories=args.categories if args.categories else settings.news_categories,
        latitude=args.lat if args.lat is not None else settings.latitude,
        longitude=args.lon if args.lon is not None else settings.longitude,
        lexicons_file=settings.lexicons_file,
    )


def _override_celsius(temperature: float | None, unit: str) -> float | None:
    if temperature is None:
        return None
    if unit == 'fahrenheit':
        return fahrenheit_to_celsius(temperature)
    return temperature


def build_weather_feed(
    settings: Settings,
    temperature: float | None = None,
    output: str | None = None,
    use_sample_data: bool = False,
) -> str:
    '''
    Fetch weather and news, filter the news by temperature and render it.

    Input:
        settings: resolved runtime settings.
        temperature: optional override in the configured unit.
        output: optional path for a JSON export.
        use_sample_data: skip all network requests.

    Output:
        The rendered plain-text briefing.
    '''
    lexicons = load_lexicons(settings.lexicons_file) if settings.lexicons_file else DEFAULT_LEXICONS
    override = _override_celsius(temperature, settings.temperature_unit)
    forecast = []

    if use_sample_data:
        weather = build_sample_weather() if override is None else build_sample_weather(override)
        articles = build_sample_articles()
        log.debug('Using sample data for feed generation.')
    else:
        if settings.has_location:
            weather = fetch_current_weather(settings.latitude, settings.longitude)
            forecast = fetch_forecast(settings.latitude, settings.longitude)
        elif override is not None:
            weather = build_sample_weather(override, location='Manual')
        else:
            raise ConfigError('A location (--lat/--lon or settings file) or --temperature is required.')
        articles = fetch_news(settings.news_categories)
        log.debug('Fetched %d article(s) for %s.', len(articles), ', '.join(settings.news_categories))

    if override is not None:
        weather = replace(weather, temperature=override)

    if not articles:
        log.warning('No news articles available.')

    filtered = filter_by_weather(articles, weather.temperature, lexicons=lexicons)
    log.info(
        'Mood %s at %s°C: %d of %d article(s) selected.',
        select_mood_bucket(weather.temperature),
        weather.temperature,
        len(filtered),
        len(articles),
    )

    if output:
        path = write_json(output, weather, filtered, unit=settings.temperature_unit, forecast=forecast)
        log.info('Wrote %s', path)
    return render_briefing(weather, filtered, unit=settings.temperature_unit, forecast=forecast)


# ****************************************************************************************
# Handle the arguments
# ****************************************************************************************


def _categories_arg(value: str) -> list[str]:
    return [item.strip() for item in value.split(',') if item.strip()]


def handle_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Show the news that suits the current weather.')
    parser.add_argument('--config', default=DEFAULT_SETTINGS_FILE, help='Path to settings YAML.')
    parser.add_argument('--lat', type=float, default=None, help='Latitude of the weather location.')
    parser.add_argument('--lon', type=float, default=None, help='Longitude of the weather location.')
    parser.add_argument(
        '--temperature',
        type=float,
        default=None,
        help='Override the current temperature (in the selected unit).',
    )
    parser.add_argument('--unit', choices=TEMPERATURE_UNITS, default=None, help='Temperature unit.')
    parser.add_argument(
        '--categories',
        type=_categories_arg,
        default=None,
        help='Comma-separated news categories, e.g. general,sports.',
    )
    parser.add_argument('--output', default=None, help='Write the filtered feed as JSON to this path.')
    parser.add_argument(
        '--sample',
        action='store_true',
        help='Use local sample data and skip all network requests.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output to stdout.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Minimal stdout.')
    args = parser.parse_args(argv)

    # File handler for logging
    if not any(isinstance(handler, logging.FileHandler) for handler in log.handlers):
        fh = logging.FileHandler(LOG_FILE, mode='w')
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        log.addHandler(fh)
        root_log.addHandler(fh)

    # Configure stdout logging based on arguments, replacing any handler from an earlier call
    global console_handler
    if console_handler is not None:
        log.removeHandler(console_handler)
        root_log.removeHandler(console_handler)
    ch = logging.StreamHandler(sys.stdout)
    if args.verbose:
        ch.setLevel(logging.DEBUG)
    elif args.quiet:
        ch.setLevel(logging.ERROR)
    else:
        ch.setLevel(logging.INFO)
    ch.setFormatter(formatter)
    log.addHandler(ch)
    root_log.addHandler(ch)
    console_handler = ch

    log.debug('Checking script requirements...')
    if not args.verbose and not args.quiet:
        log.debug('No output level specified. Defaulting to INFO.')

    log.info('++++++++++++++++++++++++++++++++++++++++++++++')
    log.info('+  %s', os.path.basename(sys.argv[0]))
    log.info('+  Python Version: %s', sys.version.split()[0])
    log.info('+  Today is: %s', date.today())
    log.info('++++++++++++++++++++++++++++++++++++++++++++++')
    return args


# ****************************************************************************************
# Main
# ****************************************************************************************


def main(argv: list[str] | None = None) -> int:
    args = handle_args(argv)
    try:
        settings = _resolve_settings(args)
        briefing = build_weather_feed(
            settings,
            temperature=args.temperature,
            output=args.output,
            use_sample_data=args.sample,
        )
    except Error as exc:
        log.error('%s', exc)
        return 1
    sys.stdout.write(briefing)
    return 0


if __name__ == '__main__':
    sys.exit(main())
