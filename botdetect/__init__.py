"""Bot Detector package"""

from .patterns import VERSION, MAX_REQUESTS, BURST_WINDOW_SECONDS, LOG_LINE_PATTERN
from .models import (LogRecord, ParseFailure, TimestampFailure, Verdict,
                     PipelineStateError, IndexNotFinalizedError, IndexFinalizedError)
from .grammar import parse_line, parse_lines, parse_response_time
from .index import ActivityIndex
from .classifier import BotClassifier, has_burst
from .config import DetectorConfig, load_config
from .analyzer import BotAnalyzer
from .output import print_report

__all__ = [
    'VERSION', 'MAX_REQUESTS', 'BURST_WINDOW_SECONDS', 'LOG_LINE_PATTERN',
    'LogRecord', 'ParseFailure', 'TimestampFailure', 'Verdict',
    'PipelineStateError', 'IndexNotFinalizedError', 'IndexFinalizedError',
    'parse_line', 'parse_lines', 'parse_response_time',
    'ActivityIndex', 'BotClassifier', 'has_burst',
    'DetectorConfig', 'load_config', 'BotAnalyzer', 'print_report',
]
