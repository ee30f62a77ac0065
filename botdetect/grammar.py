"""Bot Detector - Access-log line grammar"""

import logging
from typing import Iterable, Iterator, Union

from .models import LogRecord, ParseFailure
from .patterns import LOG_LINE_PATTERN, RESPONSE_TIME_MAX, RESPONSE_TIME_UNKNOWN

logger = logging.getLogger(__name__)

ParseResult = Union[LogRecord, ParseFailure]


def parse_response_time(value: str) -> int:
    """Convert the trailing response-time field, or -1 if it is not a usable integer."""
    try:
        response_time = int(value)
    except (TypeError, ValueError):
        logger.debug("Invalid response time value: %r", value)
        return RESPONSE_TIME_UNKNOWN

    if not 0 <= response_time <= RESPONSE_TIME_MAX:
        logger.debug("Response time out of range: %r", value)
        return RESPONSE_TIME_UNKNOWN
    return response_time


def parse_line(line: str, line_number: int = 0) -> ParseResult:
    """Parse one raw line into a LogRecord, or a ParseFailure if the grammar does not match in full."""
    stripped = line.rstrip("\r\n")
    match = LOG_LINE_PATTERN.fullmatch(stripped)
    if not match:
        return ParseFailure(line_number=line_number, raw=stripped)

    ip, country_code, timestamp, user_agent, response_time = match.groups()
    return LogRecord(
        ip=ip,
        country_code=country_code,
        timestamp=timestamp,
        user_agent=user_agent,
        response_time_ms=parse_response_time(response_time),
        line_number=line_number,
    )


def parse_lines(lines: Iterable[str], start: int = 1) -> Iterator[ParseResult]:
    """Lazily parse lines, numbering them from *start*.

    Mismatches are logged and yielded as ParseFailure so the caller can keep
    going with the remaining lines.
    """
    for line_number, line in enumerate(lines, start):
        result = parse_line(line, line_number)
        if isinstance(result, ParseFailure):
            logger.warning("No match found for line %d: %s", line_number, result.raw)
        yield result
