import io

import pytest

from desim import SimTime, SimulationAbort, StimulusRecord
from textevent import LogMgr, TextEventLog
from textevent.reader import parse_record


class TestLogMgr:
    def test_open_path(self, tmp_path, log_messages):
        path = str(tmp_path / "log.csv")
        log = LogMgr(path)
        assert not log.log_stream.closed
        assert f'NOTE: Opened log output file:  "{path}" successfully.' in log_messages(
            "INFO"
        )
        log.close()
        assert log.log_stream.closed

    def test_bad_path_fatal(self, tmp_path):
        path = str(tmp_path / "no_such_dir" / "log.csv")
        with pytest.raises(SimulationAbort, match="Could not open log output file"):
            LogMgr(path)

    def test_stream_not_owned(self):
        stream = io.StringIO()
        log = LogMgr(stream)
        log.close()
        assert not stream.closed

    def test_closed_stream_fatal(self):
        stream = io.StringIO()
        stream.close()
        with pytest.raises(SimulationAbort, match="not open, or not writable"):
            LogMgr(stream)

    def test_unwritable_stream_fatal(self):
        stream = io.BytesIO(b"")
        with pytest.raises(SimulationAbort, match="not open, or not writable"):
            LogMgr(io.TextIOWrapper(io.BufferedReader(stream)))


class TestTextEventLog:
    @pytest.fixture
    def stream(self):
        return io.StringIO()

    @pytest.fixture
    def log(self, stream):
        return TextEventLog(stream)

    def test_header(self, log, stream):
        log.write_header_or_die()
        assert stream.getvalue() == "time,text\n"

    def test_record(self, log, stream):
        log.stage_event_time(SimTime(17.3))
        log.stage_event_text("Event1")
        assert log.verify_staged_ready()
        log.write_record_or_die()
        assert stream.getvalue() == "17.3,Event1\n"
        # Written records are cleared.
        assert not log.verify_staged_ready()
        assert log.event_text == ""

    @pytest.mark.parametrize("staged", ["none", "time", "text"])
    def test_unstaged_fatal(self, log, stream, staged, log_messages):
        if staged == "time":
            log.stage_event_time(SimTime(1.0))
        elif staged == "text":
            log.stage_event_text("x")
        with pytest.raises(SimulationAbort, match="Staged data not ready"):
            log.write_record_or_die()
        assert stream.getvalue() == ""
        (fatal,) = log_messages("CRITICAL")
        assert fatal.startswith("!!!FATAL ERROR: Unable to write log record.")

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("a,b", '1.0,"a,b"\n'),
            ('say "hi"', '1.0,"say ""hi"""\n'),
            ("", "1.0,\n"),
        ],
    )
    def test_record_quoted(self, log, stream, text, expected):
        log.stage_event_time(SimTime(1.0))
        log.stage_event_text(text)
        log.write_record_or_die()
        assert stream.getvalue() == expected
        # Records read back as the same time and text.
        assert parse_record(stream.getvalue()) == StimulusRecord(1.0, text)

    def test_staged_time_is_copy(self, log):
        time = SimTime(2.0)
        log.stage_event_time(time)
        time.add_time(1.0)
        assert log.event_time == 2.0

    def test_write_after_close_fatal(self, tmp_path):
        log = TextEventLog(str(tmp_path / "log.csv"))
        log.close()
        with pytest.raises(SimulationAbort, match="Output stream is not open"):
            log.write_header_or_die()

    def test_file_output(self, tmp_path):
        path = tmp_path / "log.csv"
        log = TextEventLog(str(path))
        log.write_header_or_die()
        for time, text in [(1, "a"), (2.5, "b")]:
            log.stage_event_time(SimTime(time))
            log.stage_event_text(text)
            log.write_record_or_die()
        log.close()
        assert path.read_text() == "time,text\n1.0,a\n2.5,b\n"
