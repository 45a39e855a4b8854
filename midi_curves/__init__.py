"""MIDI to curves: turn MIDI note, CC and beat timing into keyframe curves."""

from midi_curves.clip import MidiClip, cc_channel, note_channel
from midi_curves.curve import Keyframe, KeyframeCurve, TangentMode
from midi_curves.errors import ClipFinalizedError, ConfigurationError, MidiCurvesError
from midi_curves.events import MidiEvent
from midi_curves.midi import convert_events, convert_midi_file, read_midi_events
from midi_curves.version import __version__

__all__ = [
    'ClipFinalizedError',
    'ConfigurationError',
    'Keyframe',
    'KeyframeCurve',
    'MidiClip',
    'MidiCurvesError',
    'MidiEvent',
    'TangentMode',
    '__version__',
    'cc_channel',
    'convert_events',
    'convert_midi_file',
    'note_channel',
    'read_midi_events',
]
