"""Bot Detector - Data models"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LogRecord:
    """Parsed access-log line"""
    ip: str
    country_code: str
    timestamp: str
    user_agent: str
    response_time_ms: int
    line_number: int = 0


@dataclass(frozen=True)
class ParseFailure:
    """Line that did not match the log grammar"""
    line_number: int
    raw: str


@dataclass(frozen=True)
class TimestampFailure:
    """Stored timestamp that could not be parsed during finalization"""
    ip: str
    raw: str


@dataclass(frozen=True)
class Verdict:
    """Classification of one client IP"""
    ip: str
    requests: int
    volume_bot: bool
    burst_bot: bool

    @property
    def is_bot(self) -> bool:
        return self.volume_bot and self.burst_bot


class PipelineStateError(RuntimeError):
    """An index operation was called in the wrong phase of a run"""


class IndexNotFinalizedError(PipelineStateError):
    """Timestamps were queried before finalize_timestamps() ran"""


class IndexFinalizedError(PipelineStateError):
    """Records were added to an index that is already finalized"""
