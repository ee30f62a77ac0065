"""Bot Detector - Per-run activity aggregates"""

import calendar
import logging
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from .models import IndexFinalizedError, IndexNotFinalizedError, LogRecord, TimestampFailure
from .patterns import TIMESTAMP_FIELDS

logger = logging.getLogger(__name__)


def parse_timestamp(raw: str) -> datetime:
    """Parse a dd/mm/yyyy:HH:mm:ss timestamp with smart calendar resolution.

    A day past the end of its month resolves to the month's last day
    (31/04 -> 30/04, 29/02 in a common year -> 28/02) and 24:00:00 resolves
    to midnight of the next day. Fields outside their ranges (day 00 or 32,
    month 13, minute 60) raise ValueError.
    """
    match = TIMESTAMP_FIELDS.fullmatch(raw)
    if not match:
        raise ValueError(f"timestamp {raw!r} does not match dd/mm/yyyy:HH:mm:ss")

    day, month, year, hour, minute, second = (int(field) for field in match.groups())
    end_of_day = hour == 24 and minute == 0 and second == 0
    if end_of_day:
        hour = 0
    if year >= 1 and 1 <= month <= 12 and 1 <= day <= 31:
        day = min(day, calendar.monthrange(year, month)[1])

    instant = datetime(year, month, day, hour, minute, second)
    if end_of_day:
        instant += timedelta(days=1)
    return instant


class ActivityIndex:
    """Request counts, timestamps and user agents keyed by IP and country.

    An index covers exactly one ingestion run and has two phases. Records
    are added with record()/record_all()/merge() until finalize_timestamps()
    sorts each IP's timestamps; after that the index is read-only and
    classification may begin. reset() returns it to an empty first phase.
    """

    def __init__(self):
        self.requests_by_ip: Counter = Counter()
        self.requests_by_country: Counter = Counter()
        self.timestamps_by_ip: Dict[str, List[str]] = defaultdict(list)
        self.user_agents_by_ip: Dict[str, List[str]] = defaultdict(list)
        self.timestamp_failures: List[TimestampFailure] = []
        self.finalized = False
        self._instants_by_ip: Dict[str, List[datetime]] = {}

    def __len__(self) -> int:
        return sum(self.requests_by_ip.values())

    def _check_open(self):
        if self.finalized:
            raise IndexFinalizedError("index is finalized; call reset() before recording a new run")

    def record(self, record: LogRecord):
        self._check_open()
        self.requests_by_ip[record.ip] += 1
        self.requests_by_country[record.country_code] += 1
        self.timestamps_by_ip[record.ip].append(record.timestamp)
        self.user_agents_by_ip[record.ip].append(record.user_agent)

    def record_all(self, records: Iterable[LogRecord]) -> int:
        """Record each entry in input order and return how many were recorded."""
        self._check_open()
        recorded = 0
        for record in records:
            self.record(record)
            recorded += 1
        return recorded

    def merge(self, other: "ActivityIndex"):
        """Fold a shard's aggregates into this index.

        Sequences are appended in the order of merge calls; sorting is left
        to finalize_timestamps() once every shard has been merged.
        """
        self._check_open()
        if other.finalized:
            raise IndexFinalizedError("cannot merge a finalized shard")

        self.requests_by_ip.update(other.requests_by_ip)
        self.requests_by_country.update(other.requests_by_country)
        for ip, timestamps in other.timestamps_by_ip.items():
            self.timestamps_by_ip[ip].extend(timestamps)
        for ip, user_agents in other.user_agents_by_ip.items():
            self.user_agents_by_ip[ip].extend(user_agents)

    def finalize_timestamps(self) -> List[TimestampFailure]:
        """Sort every IP's timestamps ascending and close the index.

        IPs with an unparsable timestamp keep their arrival order; each bad
        value is logged and returned instead of aborting the run.
        """
        if self.finalized:
            return list(self.timestamp_failures)

        for ip, timestamps in self.timestamps_by_ip.items():
            parsed = []
            failed = False
            for raw in timestamps:
                try:
                    parsed.append((parse_timestamp(raw), raw))
                except ValueError:
                    failed = True
                    self.timestamp_failures.append(TimestampFailure(ip=ip, raw=raw))
                    logger.warning("Error parsing timestamp %r for %s", raw, ip)

            # list.sort is stable, so equal instants keep arrival order
            parsed.sort(key=lambda pair: pair[0])
            if not failed:
                self.timestamps_by_ip[ip] = [raw for _, raw in parsed]
            self._instants_by_ip[ip] = [instant for instant, _ in parsed]

        self.finalized = True
        if self.timestamp_failures:
            logger.warning("%d timestamp(s) could not be parsed; affected IPs left unsorted",
                           len(self.timestamp_failures))
        return list(self.timestamp_failures)

    def reset(self):
        self.requests_by_ip.clear()
        self.requests_by_country.clear()
        self.timestamps_by_ip.clear()
        self.user_agents_by_ip.clear()
        self.timestamp_failures.clear()
        self._instants_by_ip.clear()
        self.finalized = False

    def count_for_ip(self, ip: str) -> int:
        return self.requests_by_ip.get(ip, 0)

    def count_for_country(self, country_code: str) -> int:
        return self.requests_by_country.get(country_code, 0)

    def timestamps_for(self, ip: str) -> List[str]:
        return list(self.timestamps_by_ip.get(ip, []))

    def user_agents_for(self, ip: str) -> List[str]:
        return list(self.user_agents_by_ip.get(ip, []))

    def instants_for(self, ip: str) -> List[datetime]:
        """Sorted parsed timestamps of *ip*; unparsable values are omitted."""
        if not self.finalized:
            raise IndexNotFinalizedError("call finalize_timestamps() before querying instants")
        return list(self._instants_by_ip.get(ip, []))
