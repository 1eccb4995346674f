import io

import pytest

from desim import SimExec, SimulationAbort
from textevent import RunConfig, TextEvent, TextEventLog, open_text_event_loader


def run_text_events(stim_path, run_until, stream):
    log = TextEventLog(stream)
    log.write_header_or_die()
    executive = SimExec()
    loader = open_text_event_loader(stim_path)
    executive.init(run_until, loader, log_manager=log, config=RunConfig())
    end_time = executive.run()
    executive.teardown()
    return end_time


class TestTextEvent:
    def test_describe(self):
        event = TextEvent(2.5, "hello")
        assert event.describe() == "TextEvent Time 2.5; Text:  hello"
        assert repr(event) == "TextEvent(time=2.5, text='hello')"

    def test_dispatch(self):
        stream = io.StringIO()
        executive = SimExec()
        executive.log_manager = TextEventLog(stream)
        TextEvent(4.0, "Boom").dispatch(executive)
        assert stream.getvalue() == "4.0,Boom\n"

    def test_dispatch_needs_log(self):
        executive = SimExec()
        with pytest.raises(SimulationAbort, match="requires a TextEventLog"):
            TextEvent(4.0, "Boom").dispatch(executive)


class TestSimulation:
    @pytest.mark.parametrize("run_until", [100.0, 100000.0])
    def test_single_event(self, tmp_path, run_until):
        stim = tmp_path / "stim.csv"
        stim.write_text("time,text\n17.3,Event1\n")
        stream = io.StringIO()
        end_time = run_text_events(str(stim), run_until, stream)
        assert end_time == 17.3
        assert stream.getvalue() == "time,text\n17.3,Event1\n"

    def test_many_events(self, tmp_path):
        lines = [f"{t},Event{i}" for i, t in enumerate([5, 50, 999, 1000, 1500, 1500])]
        stim = tmp_path / "stim.csv"
        stim.write_text("\n".join(lines) + "\n")
        stream = io.StringIO()
        end_time = run_text_events(str(stim), 100000.0, stream)
        assert end_time == 1500.0
        assert stream.getvalue().splitlines() == [
            "time,text",
            "5.0,Event0",
            "50.0,Event1",
            "999.0,Event2",
            "1000.0,Event3",
            "1500.0,Event4",
            "1500.0,Event5",
        ]

    def test_run_until(self, tmp_path):
        stim = tmp_path / "stim.csv"
        stim.write_text("1,a\n2,b\n3,c\n")
        stream = io.StringIO()
        end_time = run_text_events(str(stim), 2.5, stream)
        assert end_time == 2.5
        assert stream.getvalue() == "time,text\n1.0,a\n2.0,b\n"

    def test_text_with_commas(self, tmp_path):
        stim = tmp_path / "stim.csv"
        stim.write_text('1.0,a,b\n2.0,"c,d"\n')
        stream = io.StringIO()
        run_text_events(str(stim), 10.0, stream)
        assert stream.getvalue() == 'time,text\n1.0,"a,b"\n2.0,"c,d"\n'

    def test_negative_time_clamped(self, tmp_path, log_messages):
        stim = tmp_path / "stim.csv"
        stim.write_text("-3,early\n4,later\n")
        stream = io.StringIO()
        run_text_events(str(stim), 10.0, stream)
        assert stream.getvalue() == "time,text\n0.0,early\n4.0,later\n"
        assert len(log_messages("WARNING")) == 1
