"""Tests for the phase logger."""

import io

import pytest

from portalroute.logger import Logger, LoggingMode
from portalroute.search.astar import SearchStats


class TestLoggingMode:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, LoggingMode.NONE),
            ("INFO", LoggingMode.INFO),
            ("debug", LoggingMode.DEBUG),
            (LoggingMode.INFO, LoggingMode.INFO),
        ],
    )
    def test_from_value(self, value, expected):
        assert LoggingMode.from_value(value) is expected

    def test_invalid_mode(self):
        with pytest.raises(ValueError, match="Invalid logging mode"):
            LoggingMode.from_value("loud")


class TestLogger:
    def test_none_mode_is_silent(self, capsys):
        logger = Logger()
        logger.info("anything", key=1)
        with logger.phase("work"):
            pass
        assert capsys.readouterr().out == ""

    def test_info_skips_debug(self, capsys):
        logger = Logger(LoggingMode.INFO)
        logger.info("visible", regions=3, skipped=None)
        logger.debug("hidden")
        assert capsys.readouterr().out == "[INFO]\tvisible\tregions=3\n"

    def test_phase_start_and_complete(self, capsys):
        with Logger(LoggingMode.DEBUG).phase("map.setup", source="grid"):
            pass
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "[INFO]\tmap.setup.start\tsource=grid"
        assert lines[1] == "[INFO]\tmap.setup.complete\tsource=grid"
        assert lines[2].startswith("[DEBUG]\tmap.setup.elapsed\tseconds=")

    def test_phase_failure_reraises(self, capsys):
        logger = Logger(LoggingMode.INFO)
        with pytest.raises(RuntimeError), logger.phase("search.run"):
            raise RuntimeError("boom")
        assert "[INFO]\tsearch.run.failed\terror=boom" in capsys.readouterr().out

    def test_custom_stream(self, capsys):
        stream = io.StringIO()
        Logger(LoggingMode.INFO, stream=stream).search_stats(SearchStats(expanded=2))
        assert capsys.readouterr().out == ""
        assert stream.getvalue() == (
            "[INFO]\tsearch.stats\texpanded=2\tdiscovered=0\tpushed=0\tmax_frontier=0\n"
        )
