"""Bot Detector - Constants and patterns"""

import re

VERSION = "1.0.0"

# Detection thresholds
MAX_REQUESTS = 100
BURST_WINDOW_SECONDS = 60

# Response time sentinel for missing or unparsable values
RESPONSE_TIME_UNKNOWN = -1
RESPONSE_TIME_MAX = 2**31 - 1

TIMESTAMP_FORMAT = "%d/%m/%Y:%H:%M:%S"

# ip - country - [timestamp] "request" status bytes "-" "user agent" response_ms
LOG_LINE_PATTERN = re.compile(
    r'^(\d+\.\d+\.\d+\.\d+)\s-\s(\w+)\s-\s'
    r'\[(\d{2}/\d{2}/\d{4}:\d{2}:\d{2}:\d{2})\]\s'
    r'"\w+\s\S+\sHTTP/\d+\.\d+"\s\d{3}\s\d+\s"-"\s'
    r'"([^"]+)"\s(\d+)$',
    re.ASCII,
)

# dd/mm/yyyy:HH:mm:ss split into fields for calendar resolution
TIMESTAMP_FIELDS = re.compile(r'(\d{2})/(\d{2})/(\d{4}):(\d{2}):(\d{2}):(\d{2})', re.ASCII)
