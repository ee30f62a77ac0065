from datetime import datetime, timedelta

import pytest

from botdetect.patterns import TIMESTAMP_FORMAT


def make_line(ip="10.0.0.1", country="US", ts="01/01/2024:00:00:00",
              ua="UA1", rt="15", request="GET /a HTTP/1.1"):
    return f'{ip} - {country} - [{ts}] "{request}" 200 512 "-" "{ua}" {rt}'


def spaced_timestamps(count, seconds, start="01/01/2024:00:00:00"):
    first = datetime.strptime(start, TIMESTAMP_FORMAT)
    return [(first + timedelta(seconds=seconds * i)).strftime(TIMESTAMP_FORMAT)
            for i in range(count)]


@pytest.fixture
def line_factory():
    return make_line


@pytest.fixture
def sample_line():
    return '10.0.0.1 - US - [01/01/2024:00:00:00] "GET /a HTTP/1.1" 200 512 "-" "UA1" 15'


@pytest.fixture
def bot_lines():
    """101 requests from one FR client, 30 seconds apart."""
    return [make_line(ip="10.0.0.2", country="FR", ts=ts, ua="BotUA")
            for ts in spaced_timestamps(101, 30)]


@pytest.fixture
def log_file(tmp_path, bot_lines):
    lines = bot_lines + [
        make_line(ip="192.168.1.5", country="DE", ts="02/01/2024:10:00:00", ua="Mozilla/5.0"),
        "garbage line",
    ]
    path = tmp_path / "access.log"
    path.write_text("\n".join(lines) + "\n")
    return path
