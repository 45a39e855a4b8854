"""Exceptions raised by midi_curves."""


class MidiCurvesError(Exception):
    """Base class for all midi_curves errors."""


class ConfigurationError(MidiCurvesError, ValueError):
    """Invalid bpm, delta time or sample rate."""


class ClipFinalizedError(MidiCurvesError, RuntimeError):
    """A clip was written to or finalized after finalize() already ran."""
