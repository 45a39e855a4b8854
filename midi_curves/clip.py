"""Convert a time-stepped MIDI event stream into beat, note and CC keyframe curves.

Callers must step time in non-decreasing order; out-of-order input is not
detected and gives non-monotonic curves.
"""

import logging
import math

from midi_curves.curve import KeyframeCurve, TangentMode
from midi_curves.errors import ClipFinalizedError, ConfigurationError
from midi_curves.events import CONTROL_CHANGE, NOTE_OFF, NOTE_ON, MidiEvent

log = logging.getLogger(__name__)

BEAT_COUNT = 'BeatCount'
BEAT_CLOCK = 'BeatClock'
BAR_COUNT = 'BarCount'
BAR_CLOCK = 'BarClock'

BEATS_PER_BAR = 4


def note_channel(index: int) -> str:
    return f'Note[{index}]'


def cc_channel(index: int) -> str:
    return f'CC[{index}]'


def _set_all(curve: KeyframeCurve, left: TangentMode, right: TangentMode) -> None:
    for i in range(len(curve)):
        curve.set_tangents(i, left, right)


def apply_count_tangents(curve: KeyframeCurve) -> None:
    """Step function: counts hold until the next key."""
    _set_all(curve, TangentMode.CONSTANT, TangentMode.CONSTANT)


def apply_clock_tangents(curve: KeyframeCurve) -> None:
    """Pulse shape: low keys ramp out to the right, high keys ramp in from the left."""
    for i, key in enumerate(curve):
        if key.value < 0.5:
            curve.set_tangents(i, TangentMode.CONSTANT, TangentMode.LINEAR)
        else:
            curve.set_tangents(i, TangentMode.LINEAR, TangentMode.CONSTANT)


def apply_note_tangents(curve: KeyframeCurve) -> None:
    """Velocity gate: loud keys jump in and ramp out, quiet keys ramp in and hold."""
    for i, key in enumerate(curve):
        if key.value > 0.5:
            curve.set_tangents(i, TangentMode.CONSTANT, TangentMode.LINEAR)
        else:
            curve.set_tangents(i, TangentMode.LINEAR, TangentMode.CONSTANT)


def apply_cc_tangents(curve: KeyframeCurve) -> None:
    """Controller values hold between updates."""
    _set_all(curve, TangentMode.CONSTANT, TangentMode.CONSTANT)


def _check_positive(name: str, value: float) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f'{name} must be a number, got {value!r}') from e
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f'{name} must be positive, got {value}')
    return value


class MidiClip:
    """Accumulates keyframe curves from MIDI events at a fixed tempo.

    Usage: call step(time, events) (or write_beat + write_events) for each
    time step, then finalize() once to get the curves. A finalized clip
    cannot be written to again.
    """

    def __init__(self, bpm: float, delta_time: float) -> None:
        self._bpm = _check_positive('bpm', bpm)
        self._delta_time = _check_positive('delta_time', delta_time)

        self._beat_count = KeyframeCurve()
        self._beat_clock = KeyframeCurve()
        self._bar_count = KeyframeCurve()
        self._bar_clock = KeyframeCurve()

        self._note_curves: dict[int, KeyframeCurve] = {}
        self._cc_curves: dict[int, KeyframeCurve] = {}

        # -1 so the first write_beat always records, even inside beat 0.
        self._beat = -1
        self._finalized = False

    @property
    def bpm(self) -> float:
        return self._bpm

    @property
    def delta_time(self) -> float:
        return self._delta_time

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise ClipFinalizedError('clip has already been finalized')

    def beat_at(self, time: float) -> int:
        return math.floor(self._bpm * time / 60)

    def write_beat(self, time: float) -> None:
        """Record beat/bar count and pulse keys if time entered a new beat."""
        self._check_open()
        beat = self.beat_at(time)
        if beat == self._beat:
            return
        self._beat = beat

        self._beat_count.add_key(time, beat)
        self._add_pulse(self._beat_clock, time, beat)

        if beat % BEATS_PER_BAR == 0:
            self._bar_count.add_key(time, beat // BEATS_PER_BAR)
            self._add_pulse(self._bar_clock, time, beat)

    advance = write_beat

    def _add_pulse(self, curve: KeyframeCurve, time: float, beat: int) -> None:
        # Beat 0 has no previous pulse to close, only the falling edge.
        if beat > 0:
            curve.add_key(time - self._delta_time, 1)
        curve.add_key(time, 0)

    def _note_curve(self, index: int) -> KeyframeCurve:
        curve = self._note_curves.get(index)
        if curve is None:
            curve = self._note_curves[index] = KeyframeCurve()
        return curve

    def note_on(self, index: int, time: float, velocity: int) -> None:
        self._check_open()
        self._note_curve(index).add_key(time, velocity / 127)

    def note_off(self, index: int, time: float) -> None:
        # One quantum early so a note-on at the same instant still shows an edge.
        self._check_open()
        self._note_curve(index).add_key(time - self._delta_time, 0)

    def control_change(self, index: int, time: float, value: int) -> None:
        """Add a CC key, or overwrite the last one if it sits at the same time."""
        self._check_open()
        curve = self._cc_curves.get(index)
        if curve is None:
            curve = self._cc_curves[index] = KeyframeCurve()
            curve.add_key(time, value)
        elif not curve.set_last_value_if_near(time, value):
            curve.add_key(time, value)

    def write_events(self, time: float, events: list[MidiEvent] | None = None) -> None:
        """Route note-on, note-off and CC events at time into their curves; ignore the rest."""
        self._check_open()
        if not events:
            return
        for e in events:
            kind = e.kind
            if kind == NOTE_ON:
                self.note_on(e.data1, time, e.data2)
            elif kind == NOTE_OFF:
                self.note_off(e.data1, time)
            elif kind == CONTROL_CHANGE:
                self.control_change(e.data1, time, e.data2)
            else:
                log.debug('Dropping status 0x%02X at %.3fs', e.status, time)

    def step(self, time: float, events: list[MidiEvent] | None = None) -> None:
        """Advance the beat tracker to time, then write any events at time."""
        self.write_beat(time)
        self.write_events(time, events)

    def finalize(self) -> dict[str, KeyframeCurve]:
        """Apply tangent modes to every curve and hand them over. Runs once."""
        self._check_open()
        self._finalized = True

        apply_count_tangents(self._beat_count)
        apply_clock_tangents(self._beat_clock)
        apply_count_tangents(self._bar_count)
        apply_clock_tangents(self._bar_clock)

        curves: dict[str, KeyframeCurve] = {
            BEAT_COUNT: self._beat_count,
            BEAT_CLOCK: self._beat_clock,
            BAR_COUNT: self._bar_count,
            BAR_CLOCK: self._bar_clock,
        }
        for index in sorted(self._note_curves):
            curve = self._note_curves[index]
            apply_note_tangents(curve)
            curves[note_channel(index)] = curve
        for index in sorted(self._cc_curves):
            curve = self._cc_curves[index]
            apply_cc_tangents(curve)
            curves[cc_channel(index)] = curve

        log.debug(
            'Finalized clip: %d beat keys, %d note curves, %d CC curves',
            len(self._beat_count), len(self._note_curves), len(self._cc_curves),
        )
        return curves
