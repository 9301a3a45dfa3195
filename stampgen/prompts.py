"""
Prompt for the model fallback used when a phrase can't be parsed locally.
"""

REPLY_FORMAT = "%Y-%m-%d %H:%M:%S"

DATE_FALLBACK_PROMPT = (
    'Parse the following date/time: "{phrase}". '
    "If it's relative (like 'next Thursday'), calculate the actual date based on "
    "the current date and time, which is {now} in the {time_zone} time zone. "
    'Return only the parsed date and time in the format "YYYY-MM-DD HH:MM:SS", nothing else.'
)


def build_fallback_prompt(phrase, now, time_zone):
    """Fills the fallback prompt. `now` must already be expressed in `time_zone`."""
    return DATE_FALLBACK_PROMPT.format(
        phrase=phrase,
        now=now.isoformat(timespec="seconds"),
        time_zone=time_zone,
    )
