"""Decoded MIDI channel events as consumed by MidiClip."""

from dataclasses import dataclass

import mido

NOTE_OFF = 0x80
NOTE_ON = 0x90
CONTROL_CHANGE = 0xB0

# mido message type -> status high nibble
_MESSAGE_STATUS = {
    'note_off': NOTE_OFF,
    'note_on': NOTE_ON,
    'control_change': CONTROL_CHANGE,
}


@dataclass(frozen=True)
class MidiEvent:
    """One channel message: status byte plus two data bytes (0-127)."""

    status: int
    data1: int = 0
    data2: int = 0

    @property
    def kind(self) -> int:
        return self.status & 0xF0

    @property
    def channel(self) -> int:
        return self.status & 0x0F

    @classmethod
    def note_on(cls, note: int, velocity: int, channel: int = 0) -> 'MidiEvent':
        return cls(NOTE_ON | channel, note, velocity)

    @classmethod
    def note_off(cls, note: int, velocity: int = 0, channel: int = 0) -> 'MidiEvent':
        return cls(NOTE_OFF | channel, note, velocity)

    @classmethod
    def control_change(cls, control: int, value: int, channel: int = 0) -> 'MidiEvent':
        return cls(CONTROL_CHANGE | channel, control, value)

    @classmethod
    def from_message(cls, msg: mido.Message) -> 'MidiEvent | None':
        """Build an event from a mido note/CC message; other messages give None.

        A note_on with velocity 0 is a note-off by MIDI convention.
        """
        status = _MESSAGE_STATUS.get(msg.type)
        if status is None:
            return None
        if status == CONTROL_CHANGE:
            return cls(status | msg.channel, msg.control, msg.value)
        if status == NOTE_ON and msg.velocity == 0:
            status = NOTE_OFF
        return cls(status | msg.channel, msg.note, msg.velocity)
