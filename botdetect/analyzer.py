"""Bot Detector - Pipeline driver"""

import logging
from concurrent.futures import ProcessPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from rich.progress import Progress, SpinnerColumn, TextColumn

from .classifier import BotClassifier
from .config import DetectorConfig
from .grammar import parse_lines
from .index import ActivityIndex
from .models import LogRecord, ParseFailure

logger = logging.getLogger(__name__)

DETAIL_LIMIT = 50


def _ingest_shard(lines: List[str], start: int) -> Tuple[ActivityIndex, List[ParseFailure]]:
    index = ActivityIndex()
    failures = []
    for result in parse_lines(lines, start):
        if isinstance(result, LogRecord):
            index.record(result)
        else:
            failures.append(result)
    return index, failures


def _split(lines: List[str], shards: int) -> List[Tuple[List[str], int]]:
    size = -(-len(lines) // shards)
    return [(lines[i:i + size], i + 1) for i in range(0, len(lines), size)]


class BotAnalyzer:
    """Runs one ingestion and classification pass per call"""

    def __init__(self, config: Optional[DetectorConfig] = None, console=None):
        self.config = config or DetectorConfig()
        self.console = console
        self.index = ActivityIndex()
        self.classifier: Optional[BotClassifier] = None
        self.parse_failures: List[ParseFailure] = []
        self.total_lines = 0

    def analyze_file(self, filepath: str) -> Dict:
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {filepath}")

        logger.info("Loading file %s", path)
        with open(path, 'r', encoding='utf-8', errors='ignore') as f:
            lines = f.readlines()

        if self.console is not None:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console,
                transient=True,
            ) as progress:
                progress.add_task(f"Analyzing {len(lines):,} lines...", total=None)
                return self.analyze_lines(lines)
        return self.analyze_lines(lines)

    def analyze_lines(self, lines: Iterable[str]) -> Dict:
        """Ingest, finalize and classify *lines* as a fresh run."""
        lines = list(lines)
        self.total_lines = len(lines)
        self.index = ActivityIndex()
        self.parse_failures = []

        if self.config.shards > 1 and len(lines) > 1:
            self._ingest_sharded(lines)
        else:
            shard, failures = _ingest_shard(lines, 1)
            self.index.merge(shard)
            self.parse_failures.extend(failures)

        self.index.finalize_timestamps()
        self.classifier = BotClassifier.from_config(self.index, self.config)
        logger.info("Parsed %d of %d lines (%d unparsable)",
                    len(self.index), self.total_lines, len(self.parse_failures))
        return self.generate_report()

    def _ingest_sharded(self, lines: List[str]):
        chunks = _split(lines, self.config.shards)
        logger.debug("Ingesting %d lines in %d shards", len(lines), len(chunks))
        with ProcessPoolExecutor(max_workers=len(chunks)) as pool:
            results = list(pool.map(_ingest_shard, *zip(*chunks)))

        # merge in shard order so arrival order and failure order match the input
        for shard, failures in results:
            self.index.merge(shard)
            self.parse_failures.extend(failures)

    def generate_report(self) -> Dict:
        if self.classifier is None:
            raise RuntimeError("no run has been analyzed yet")

        index = self.index
        classifier = self.classifier
        top_n = self.config.top_n
        bot_ips = classifier.bot_ips()

        return {
            'summary': {
                'total_lines': self.total_lines,
                'parsed_records': len(index),
                'parse_failures': len(self.parse_failures),
                'timestamp_failures': len(index.timestamp_failures),
                'unique_ips': len(index.requests_by_ip),
                'unique_countries': len(index.requests_by_country),
                'bot_count': len(bot_ips),
            },
            'thresholds': {
                'max_requests': classifier.max_requests,
                'burst_window_seconds': classifier.burst_window_seconds,
            },
            'top_ips': dict(index.requests_by_ip.most_common(top_n)),
            'top_countries': dict(index.requests_by_country.most_common(top_n)),
            'bot_countries': {cc: index.count_for_country(cc)
                              for cc in classifier.volume_bot_countries()},
            'volume_bot_ips': classifier.volume_bot_ips(),
            'bots': [
                {
                    'ip': ip,
                    'requests': index.count_for_ip(ip),
                    'timestamps': index.timestamps_for(ip),
                    'user_agents': index.user_agents_for(ip),
                }
                for ip in bot_ips
            ],
            'parse_failure_lines': [f.raw for f in self.parse_failures[:DETAIL_LIMIT]],
            'timestamp_failure_details': [
                {'ip': f.ip, 'timestamp': f.raw}
                for f in index.timestamp_failures[:DETAIL_LIMIT]
            ],
        }
