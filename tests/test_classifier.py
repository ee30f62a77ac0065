"""Tests for botdetect/classifier.py"""

from datetime import datetime, timedelta

import pytest

from botdetect.classifier import BotClassifier, has_burst
from botdetect.config import DetectorConfig
from botdetect.grammar import parse_lines
from botdetect.index import ActivityIndex
from botdetect.models import IndexNotFinalizedError, LogRecord, Verdict

from conftest import make_line, spaced_timestamps


def _index(lines):
    index = ActivityIndex()
    index.record_all(r for r in parse_lines(lines) if isinstance(r, LogRecord))
    index.finalize_timestamps()
    return index


def _lines(ip, count, seconds, country="US"):
    return [make_line(ip=ip, country=country, ts=ts) for ts in spaced_timestamps(count, seconds)]


class TestHasBurst:
    T0 = datetime(2024, 1, 1)

    def test_empty_and_single(self):
        assert not has_burst([])
        assert not has_burst([self.T0])

    def test_gap_of_60_seconds_is_not_burst(self):
        assert not has_burst([self.T0, self.T0 + timedelta(seconds=60)])

    def test_gap_of_59_seconds_is_burst(self):
        assert has_burst([self.T0, self.T0 + timedelta(seconds=59)])

    def test_identical_instants_are_burst(self):
        assert has_burst([self.T0, self.T0])

    def test_any_pair_qualifies(self):
        instants = [self.T0, self.T0 + timedelta(minutes=5), self.T0 + timedelta(minutes=5, seconds=10)]
        assert has_burst(instants)

    def test_custom_window(self):
        instants = [self.T0, self.T0 + timedelta(seconds=90)]
        assert not has_burst(instants)
        assert has_burst(instants, window_seconds=120)


class TestVolumeThreshold:
    def test_exactly_100_is_not_bot(self):
        classifier = BotClassifier(_index(_lines("10.0.0.5", 100, 10)))
        assert not classifier.is_volume_bot_ip("10.0.0.5")
        assert not classifier.is_volume_bot_country("US")
        assert classifier.volume_bot_ips() == []

    def test_101_is_bot(self):
        classifier = BotClassifier(_index(_lines("10.0.0.5", 101, 10)))
        assert classifier.is_volume_bot_ip("10.0.0.5")
        assert classifier.is_volume_bot_country("US")
        assert classifier.volume_bot_countries() == ["US"]

    def test_country_aggregates_across_ips(self):
        lines = _lines("10.0.0.1", 60, 120, "DE") + _lines("10.0.0.2", 60, 120, "DE")
        classifier = BotClassifier(_index(lines))
        assert classifier.is_volume_bot_country("DE")
        assert classifier.volume_bot_ips() == []

    def test_missing_keys_are_not_bots(self):
        classifier = BotClassifier(_index([]))
        assert not classifier.is_volume_bot_ip("1.1.1.1")
        assert not classifier.is_volume_bot_country("ZZ")
        assert not classifier.is_burst_bot("1.1.1.1")
        assert not classifier.is_bot("1.1.1.1")

    def test_thresholds_from_config(self):
        config = DetectorConfig(max_requests=2, burst_window_seconds=30)
        classifier = BotClassifier.from_config(_index(_lines("10.0.0.5", 3, 20)), config)
        assert classifier.is_bot("10.0.0.5")


class TestBurst:
    def test_unsorted_input_is_sorted_before_check(self):
        # 90s apart in arrival order, but 10s apart once sorted
        lines = [
            make_line(ts="01/01/2024:00:00:00"),
            make_line(ts="01/01/2024:00:01:30"),
            make_line(ts="01/01/2024:00:00:10"),
        ]
        assert BotClassifier(_index(lines)).is_burst_bot("10.0.0.1")

    def test_spread_out_requests_are_not_burst(self):
        assert not BotClassifier(_index(_lines("10.0.0.1", 5, 60))).is_burst_bot("10.0.0.1")


class TestCombinedVerdict:
    def test_scenario_101_requests_30_seconds_apart(self, bot_lines):
        index = _index(bot_lines)
        classifier = BotClassifier(index)

        assert index.count_for_ip("10.0.0.2") == 101
        assert index.count_for_country("FR") == 101
        assert classifier.is_volume_bot_ip("10.0.0.2")
        assert classifier.is_burst_bot("10.0.0.2")
        assert classifier.is_bot("10.0.0.2")
        assert classifier.is_volume_bot_country("FR")
        assert classifier.bot_ips() == ["10.0.0.2"]

    def test_volume_without_burst_is_not_bot(self):
        classifier = BotClassifier(_index(_lines("10.0.0.3", 150, 60)))
        assert classifier.is_volume_bot_ip("10.0.0.3")
        assert not classifier.is_burst_bot("10.0.0.3")
        assert not classifier.is_bot("10.0.0.3")
        assert classifier.bot_ips() == []

    def test_burst_without_volume_is_not_bot(self):
        classifier = BotClassifier(_index(_lines("10.0.0.4", 5, 1)))
        assert classifier.is_burst_bot("10.0.0.4")
        assert not classifier.is_bot("10.0.0.4")

    def test_is_bot_is_idempotent(self, bot_lines):
        classifier = BotClassifier(_index(bot_lines))
        assert classifier.is_bot("10.0.0.2") == classifier.is_bot("10.0.0.2")

    def test_verdicts(self, bot_lines):
        lines = bot_lines + [make_line(ip="10.0.0.7")]
        classifier = BotClassifier(_index(lines))
        verdicts = {v.ip: v for v in classifier.verdicts()}

        assert verdicts["10.0.0.2"] == Verdict(ip="10.0.0.2", requests=101,
                                               volume_bot=True, burst_bot=True)
        assert verdicts["10.0.0.2"].is_bot
        assert not verdicts["10.0.0.7"].is_bot
        assert classifier.verdict_for("9.9.9.9") == Verdict("9.9.9.9", 0, False, False)


def test_classifier_requires_finalized_index():
    index = ActivityIndex()
    with pytest.raises(IndexNotFinalizedError):
        BotClassifier(index)
