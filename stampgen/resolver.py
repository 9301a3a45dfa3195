"""
Turns a natural-language date/time phrase into a UNIX timestamp.

Strategies are tried in order and the first one that yields a valid instant wins:

1. absolute dates ("2025-03-05 15:00", "March 5, 2025 3pm")
2. relative phrases ("today", "tomorrow at 9", "next friday at 3:30pm")
3. the language model fallback, only when both of the above miss
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone

from dateutil import parser as date_parser

from stampgen import utils
from stampgen.errors import ConfigError, InvalidResult, MissingInput, ParseError
from stampgen.prompts import REPLY_FORMAT, build_fallback_prompt

logger = logging.getLogger(__name__)

NEXT_WEEKDAY_RE = re.compile(r"\bnext\s+(" + "|".join(utils.DAYS_OF_WEEK) + r")\b")


def utc_now():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ResolveContext:
    phrase: str
    zone: object
    time_zone: str
    now: datetime  # aware, expressed in `zone`


def parse_absolute(ctx: ResolveContext):
    """
    Parses the whole phrase as a calendar date/time literal.

    dateutil fills any field the phrase leaves out from `default`, so "30 minutes",
    "friday at 3pm" or "5" would come back as some time today. Parsing against two
    defaults that share no year, month or day exposes that: a real date gives the
    same answer both times.
    """
    if not any(ch.isdigit() for ch in ctx.phrase):
        return None
    default = utils.start_of_day(ctx.now)
    other_default = datetime(
        default.year + 1 if default.year < 9999 else default.year - 1,
        1 if default.month != 1 else 2,
        1 if default.day != 1 else 2,
    )
    try:
        parsed = date_parser.parse(ctx.phrase, default=default)
        check = date_parser.parse(ctx.phrase, default=other_default)
    except (ValueError, OverflowError):
        return None
    if parsed != check:
        logger.debug(f"{ctx.phrase!r} doesn't name a full calendar date")
        return None
    if parsed.tzinfo is None:
        return utils.localize(ctx.zone, parsed)
    return parsed


def parse_relative(ctx: ResolveContext):
    """Handles 'today', 'tomorrow' and 'next <weekday>', each with an optional 'at <time>'."""
    lowered = ctx.phrase.lower()
    today = ctx.now.date()

    if "today" in lowered:
        day = today
    elif "tomorrow" in lowered:
        day = utils.add_days(today, 1)
    else:
        match = NEXT_WEEKDAY_RE.search(lowered)
        if not match:
            return None
        target = utils.DAYS_OF_WEEK.index(match.group(1))
        day = utils.add_days(today, utils.days_until_next(target, today.weekday()))

    time_of_day = utils.parse_time_of_day(utils.time_clause(lowered))
    if time_of_day is None:
        return None
    hour, minute = time_of_day
    return utils.at_wall_clock(ctx.zone, day, hour, minute)


LOCAL_STRATEGIES = [
    ("absolute", parse_absolute),
    ("relative", parse_relative),
]


class DateResolver:
    """
    Resolves phrases to epoch seconds.

    `fallback` is any object with an async `complete(prompt) -> str` method, or None
    when no model is configured. `clock` returns the current aware datetime.
    """

    def __init__(self, fallback=None, clock=utc_now, strategies=None):
        self.fallback = fallback
        self.clock = clock
        self.strategies = strategies if strategies is not None else LOCAL_STRATEGIES

    async def resolve(self, phrase: str, time_zone: str) -> int:
        if phrase is None or not str(phrase).strip():
            raise MissingInput("Input is required")
        phrase = str(phrase).strip()
        zone = utils.get_zone(time_zone)
        ctx = ResolveContext(
            phrase=phrase,
            zone=zone,
            time_zone=zone.zone,
            now=self.clock().astimezone(zone),
        )

        out_of_range = None
        for name, strategy in self.strategies:
            result = strategy(ctx)
            if result is None:
                logger.debug(f"{name} parse missed: {phrase!r}")
                continue
            seconds = utils.to_epoch_seconds(result)
            if seconds is None:
                logger.debug(f"{name} parse out of range: {phrase!r} => {result}")
                out_of_range = out_of_range or result
                continue
            logger.info(f"Parsed {phrase!r} as {name} date: {result.isoformat()} => {seconds}")
            return seconds

        if self.fallback is None:
            if out_of_range is not None:
                raise InvalidResult(f"Resolved date is out of range: {out_of_range.isoformat()}")
            raise ConfigError("Language model fallback is not configured (FANAR_API_KEY is not set)")

        logger.info(f"Failed to parse {phrase!r} locally, falling back to the language model")
        return await self._resolve_with_model(ctx)

    async def _resolve_with_model(self, ctx: ResolveContext) -> int:
        prompt = build_fallback_prompt(ctx.phrase, ctx.now, ctx.time_zone)
        reply = await self.fallback.complete(prompt)
        extracted = reply.strip()
        logger.info(f"Language model reply for {ctx.phrase!r}: {extracted!r}")

        try:
            parsed = datetime.strptime(extracted, REPLY_FORMAT)
        except ValueError:
            logger.error(f"Failed to parse date and time from model reply: {extracted!r}")
            raise ParseError("Could not parse the date and time")

        seconds = utils.to_epoch_seconds(utils.localize(ctx.zone, parsed))
        if seconds is None:
            raise InvalidResult(f"Resolved date is out of range: {extracted}")
        return seconds
