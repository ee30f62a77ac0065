"""Bot Detector - Volume and burst-interval heuristics"""

from datetime import datetime
from typing import List, Sequence

from .index import ActivityIndex
from .models import IndexNotFinalizedError, Verdict
from .patterns import BURST_WINDOW_SECONDS, MAX_REQUESTS


def has_burst(instants: Sequence[datetime], window_seconds: float = BURST_WINDOW_SECONDS) -> bool:
    """True if two consecutive ascending instants are less than *window_seconds* apart."""
    for earlier, later in zip(instants, instants[1:]):
        if (later - earlier).total_seconds() < window_seconds:
            return True
    return False


class BotClassifier:
    """Derives verdicts from a finalized ActivityIndex.

    Nothing is cached: every query reads the index, so verdicts always
    reflect its current contents.
    """

    def __init__(self, index: ActivityIndex, max_requests: int = MAX_REQUESTS,
                 burst_window_seconds: float = BURST_WINDOW_SECONDS):
        if not index.finalized:
            raise IndexNotFinalizedError("classifier needs a finalized index")
        self.index = index
        self.max_requests = max_requests
        self.burst_window_seconds = burst_window_seconds

    @classmethod
    def from_config(cls, index: ActivityIndex, config) -> "BotClassifier":
        return cls(index, max_requests=config.max_requests,
                   burst_window_seconds=config.burst_window_seconds)

    def is_volume_bot_ip(self, ip: str) -> bool:
        return self.index.count_for_ip(ip) > self.max_requests

    def is_volume_bot_country(self, country_code: str) -> bool:
        return self.index.count_for_country(country_code) > self.max_requests

    def is_burst_bot(self, ip: str) -> bool:
        return has_burst(self.index.instants_for(ip), self.burst_window_seconds)

    def is_bot(self, ip: str) -> bool:
        return self.is_volume_bot_ip(ip) and self.is_burst_bot(ip)

    def volume_bot_ips(self) -> List[str]:
        return [ip for ip in self.index.requests_by_ip if self.is_volume_bot_ip(ip)]

    def volume_bot_countries(self) -> List[str]:
        return [cc for cc in self.index.requests_by_country if self.is_volume_bot_country(cc)]

    def bot_ips(self) -> List[str]:
        return [ip for ip in self.volume_bot_ips() if self.is_burst_bot(ip)]

    def verdict_for(self, ip: str) -> Verdict:
        return Verdict(
            ip=ip,
            requests=self.index.count_for_ip(ip),
            volume_bot=self.is_volume_bot_ip(ip),
            burst_bot=self.is_burst_bot(ip),
        )

    def verdicts(self) -> List[Verdict]:
        return [self.verdict_for(ip) for ip in self.index.requests_by_ip]
