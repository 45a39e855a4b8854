"""Read MIDI files with mido and drive a MidiClip at a fixed sample rate."""

import logging
import math

import mido

from midi_curves.clip import MidiClip
from midi_curves.curve import KeyframeCurve
from midi_curves.errors import ConfigurationError
from midi_curves.events import MidiEvent

log = logging.getLogger(__name__)

DEFAULT_TEMPO = 500_000  # us per beat, 120 bpm
DEFAULT_SAMPLE_RATE = 60.0

# (time_sec, event)
TimedEvent = tuple[float, MidiEvent]


def _first_tempo(mid: mido.MidiFile) -> int:
    for msg in mido.merge_tracks(mid.tracks):
        if msg.type == 'set_tempo':
            return msg.tempo
    return DEFAULT_TEMPO


def file_bpm(path: str) -> float:
    """BPM from the file's first set_tempo (120 if it has none)."""
    return mido.tempo2bpm(_first_tempo(mido.MidiFile(path)))


def read_midi_events(path: str) -> list[TimedEvent]:
    """Decode note and CC messages from a MIDI file into (time_sec, event), in time order.

    Only the first tempo is used; later tempo changes are ignored.
    """
    return _events_from_file(mido.MidiFile(path), path)


def _events_from_file(mid: mido.MidiFile, path: str) -> list[TimedEvent]:
    ticks_per_beat = mid.ticks_per_beat
    tempo = _first_tempo(mid)
    time_ticks = 0
    events: list[TimedEvent] = []
    for msg in mido.merge_tracks(mid.tracks):
        time_ticks += msg.time
        if msg.is_meta:
            continue
        event = MidiEvent.from_message(msg)
        if event is not None:
            events.append((mido.tick2second(time_ticks, ticks_per_beat, tempo), event))
    log.info('Read %d events from %s', len(events), path)
    return events


def convert_events(
    events: list[TimedEvent],
    bpm: float,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
    duration: float = 0.0,
) -> dict[str, KeyframeCurve]:
    """Step a MidiClip at 1/sample_rate intervals over events and return its finalized curves.

    Each step at time t receives the events with prev_t < time <= t. Stepping
    covers the last event and at least duration seconds.

    Events are quantized to the end of their step, so a note shorter than one
    step gets its off key (placed one step early) before its on key and stays
    held. At the default 60 Hz, notes shorter than 1/60 s are lost.
    """
    if not sample_rate or not math.isfinite(sample_rate) or sample_rate <= 0:
        raise ConfigurationError(f'sample_rate must be positive, got {sample_rate}')
    clip = MidiClip(bpm, 1.0 / sample_rate)

    end = max(duration, events[-1][0] if events else 0.0)
    last_step = math.ceil(end * sample_rate)
    i = 0
    for n in range(last_step + 1):
        t = n / sample_rate
        batch: list[MidiEvent] = []
        while i < len(events) and events[i][0] <= t:
            batch.append(events[i][1])
            i += 1
        clip.step(t, batch)
    # Float rounding can leave stragglers just past the final step.
    if i < len(events):
        clip.write_events(last_step / sample_rate, [e for _, e in events[i:]])

    curves = clip.finalize()
    log.info('Converted %d events into %d curves (%d steps)', len(events), len(curves), last_step + 1)
    return curves


def convert_midi_file(
    path: str,
    bpm: float | None = None,
    sample_rate: float = DEFAULT_SAMPLE_RATE,
) -> dict[str, KeyframeCurve]:
    """Read a MIDI file and convert it to curves. bpm defaults to the file's tempo."""
    mid = mido.MidiFile(path)
    if bpm is None:
        bpm = mido.tempo2bpm(_first_tempo(mid))
    events = _events_from_file(mid, path)
    return convert_events(events, bpm, sample_rate=sample_rate, duration=mid.length)
