from __future__ import annotations

import time

import pytest

from termslides import (
    EmitError,
    InputError,
    KeyEvent,
    Pause,
    PresentError,
    RecordingSink,
    ResizeEvent,
    ScriptedInput,
    Slide,
    SlideSequencer,
    SlideState,
    WaitForKey,
    instant,
    render_screen,
    slide,
    typed,
)


class ObservingInput(ScriptedInput):
    """Scripted input that remembers what the sink showed at each read."""

    def __init__(self, sink: RecordingSink, sequencer_ref: list[SlideSequencer], *keys: str) -> None:
        super().__init__(KeyEvent(key) for key in keys)
        self._sink = sink
        self._sequencer_ref = sequencer_ref
        self.seen: list[str] = []
        self.states: list[SlideState] = []
        self.read_at: list[float] = []

    def read_event(self):
        self.seen.append(self._sink.text)
        self.read_at.append(time.monotonic())
        if self._sequencer_ref:
            self.states.append(self._sequencer_ref[0].state)
        return super().read_event()


class BrokenSink(RecordingSink):
    def __init__(self, poison: str) -> None:
        super().__init__()
        self._poison = poison

    def write(self, text: str) -> None:
        if self._poison in text:
            raise OSError("terminal went away")
        super().write(text)


def test_hello_world_scenario_timing() -> None:
    sink = RecordingSink()
    ref: list[SlideSequencer] = []
    events = ObservingInput(sink, ref, "enter")
    sequencer = SlideSequencer(sink, events)
    ref.append(sequencer)

    started = time.monotonic()
    sequencer.present(slide(instant("Hello, "), typed("world", 0.01)))

    assert [record.text for record in sink.records] == ["Hello, ", "w", "o", "r", "l", "d"]
    assert events.read_at[0] - started >= 0.04
    assert events.seen == ["Hello, world"]
    assert events.states == [SlideState.AWAITING_INPUT]
    assert sequencer.state is SlideState.DONE


def test_written_text_is_fragment_text_in_order() -> None:
    sink = RecordingSink()
    fragments = [instant("one "), typed("two ", 0.001, "bold"), instant("three", "red"), typed("!", 0.001)]
    SlideSequencer(sink, ScriptedInput.keys("space")).present(fragments)
    assert sink.text == "one two three!"


def test_empty_slide_writes_nothing_and_waits_for_one_key() -> None:
    sink = RecordingSink()
    events = ScriptedInput.keys("enter", "enter")
    SlideSequencer(sink, events).present(Slide())

    assert sink.records == []
    assert sink.flushes == 0
    assert events.consumed == 1
    assert events.remaining == 1


def test_non_qualifying_events_are_discarded() -> None:
    events = ScriptedInput([ResizeEvent(rows=40, cols=100), KeyEvent("x"), KeyEvent("left"), KeyEvent("right")])
    SlideSequencer(RecordingSink(), events).present([])
    assert events.consumed == 4


def test_any_key_advances_when_keys_are_unrestricted() -> None:
    events = ScriptedInput([ResizeEvent(rows=40, cols=100), KeyEvent("x"), KeyEvent("enter")])
    SlideSequencer(RecordingSink(), events, advance_keys=None).present([])
    assert events.consumed == 2


def test_emit_failure_stops_slide_without_waiting() -> None:
    sink = BrokenSink(poison="B")
    events = ScriptedInput.keys("enter")
    sequencer = SlideSequencer(sink, events)

    with pytest.raises(PresentError) as excinfo:
        sequencer.present(slide(instant("A"), instant("B"), instant("C")))

    assert excinfo.value.index == 1
    assert isinstance(excinfo.value.emit_error, EmitError)
    assert sink.text == "A"
    assert events.consumed == 0
    assert sequencer.state is SlideState.FAILED


def test_input_failure_is_wrapped() -> None:
    sequencer = SlideSequencer(RecordingSink(), ScriptedInput())
    with pytest.raises(PresentError) as excinfo:
        sequencer.present([instant("done")])

    assert isinstance(excinfo.value.__cause__, InputError)
    assert excinfo.value.index is None
    assert excinfo.value.emit_error is None
    assert sequencer.state is SlideState.FAILED


def test_os_error_from_input_is_wrapped() -> None:
    class Unplugged:
        def read_event(self):
            raise OSError("EIO")

    with pytest.raises(PresentError) as excinfo:
        SlideSequencer(RecordingSink(), Unplugged()).present([])
    assert isinstance(excinfo.value.__cause__, OSError)


def test_wait_for_key_holds_back_later_fragments() -> None:
    sink = RecordingSink()
    events = ObservingInput(sink, [], "x", "enter", "enter")
    SlideSequencer(sink, events).present(slide(instant("before "), WaitForKey(), instant("after")))

    assert events.seen == ["before ", "before ", "before after"]
    assert events.remaining == 0


def test_pause_sleeps_without_writing() -> None:
    sink = RecordingSink()
    sleeps: list[float] = []
    SlideSequencer(sink, ScriptedInput.keys("enter"), sleep=sleeps.append).present(
        slide(instant("a"), Pause(0.25), typed("bc", 0.01))
    )
    assert sleeps == [0.25, 0.01]
    assert sink.text == "abc"


def test_bold_fragment_followed_by_plain_fragment() -> None:
    sink = RecordingSink()
    SlideSequencer(sink, ScriptedInput.keys("enter"), sleep=lambda _: None).present(
        slide(typed("Hi", 0.01, "bold"), instant("!"))
    )

    assert [record.style is not None for record in sink.records] == [True, True, False]
    screen = render_screen(sink.ansi)
    assert screen.text == "Hi!"
    assert screen.cell(0, 0).bold and screen.cell(0, 1).bold
    assert not screen.cell(0, 2).bold
    assert screen.cell(0, 2).is_plain


def test_sequencer_can_present_again_after_failure() -> None:
    events = ScriptedInput.keys("enter")
    sequencer = SlideSequencer(RecordingSink(), events)
    sequencer.present(["first"])
    with pytest.raises(PresentError):
        sequencer.present(["second"])
    events.push(KeyEvent("enter"))
    sequencer.present(["third"])
    assert sequencer.state is SlideState.DONE
    assert sequencer.position is None


def test_slide_builder_accepts_strings_and_rejects_unknown_directives() -> None:
    built = slide("plain ", instant("fast"), typed("!", 0.01))
    assert built.text == "plain fast!"
    assert len(built) == 3
    with pytest.raises(TypeError):
        Slide((object(),))  # type: ignore[arg-type]
