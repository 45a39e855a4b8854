"""Keyframe curves: ordered (time, value) samples with per-key tangent modes."""

import bisect
import enum
import math
from dataclasses import dataclass, replace
from typing import Iterator

# Two key times closer than this are treated as the same instant.
TIME_TOLERANCE = 1e-6


class TangentMode(enum.Enum):
    """Interpolation on one side of a key: CONSTANT holds, LINEAR ramps."""

    CONSTANT = 'constant'
    LINEAR = 'linear'


@dataclass
class Keyframe:
    time: float
    value: float
    left: TangentMode = TangentMode.LINEAR
    right: TangentMode = TangentMode.LINEAR


def times_close(a: float, b: float, tolerance: float = TIME_TOLERANCE) -> bool:
    """True if two key times fall within the coalescing window."""
    return math.isclose(a, b, rel_tol=tolerance, abs_tol=tolerance)


class KeyframeCurve:
    """Growable keyframe list kept in non-decreasing time order."""

    def __init__(self, keys: list[Keyframe] | None = None) -> None:
        self._keys: list[Keyframe] = sorted(keys or [], key=lambda k: k.time)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[Keyframe]:
        return iter(self._keys)

    def __getitem__(self, index: int) -> Keyframe:
        return self._keys[index]

    def __setitem__(self, index: int, key: Keyframe) -> None:
        self.move_key(index, key)

    def __repr__(self) -> str:
        return f'KeyframeCurve({len(self._keys)} keys)'

    def keys(self) -> list[Keyframe]:
        return list(self._keys)

    def times(self) -> list[float]:
        return [k.time for k in self._keys]

    def values(self) -> list[float]:
        return [k.value for k in self._keys]

    @property
    def start_time(self) -> float | None:
        return self._keys[0].time if self._keys else None

    @property
    def end_time(self) -> float | None:
        return self._keys[-1].time if self._keys else None

    def _insert_index(self, time: float) -> int:
        return bisect.bisect_right(self._keys, time, key=lambda k: k.time)

    def add_key(self, time: float, value: float) -> int:
        """Insert a new key after any keys at the same time. Returns its index."""
        key = Keyframe(float(time), float(value))
        if not self._keys or time >= self._keys[-1].time:
            self._keys.append(key)
            return len(self._keys) - 1
        index = self._insert_index(time)
        self._keys.insert(index, key)
        return index

    def move_key(self, index: int, key: Keyframe) -> int:
        """Replace the key at index with key, re-sorting if its time moved. Returns the new index."""
        if not -len(self._keys) <= index < len(self._keys):
            raise IndexError(f'keyframe index {index} out of range')
        self._keys.pop(index)
        new_index = self._insert_index(key.time)
        self._keys.insert(new_index, key)
        return new_index

    def set_last_value_if_near(self, time: float, value: float, tolerance: float = TIME_TOLERANCE) -> bool:
        """Overwrite the last key's value if its time is within tolerance of time."""
        if not self._keys or not times_close(self._keys[-1].time, time, tolerance):
            return False
        self._keys[-1] = replace(self._keys[-1], value=float(value))
        return True

    def set_tangents(self, index: int, left: TangentMode, right: TangentMode) -> None:
        key = self._keys[index]
        key.left = left
        key.right = right

    def evaluate(self, time: float) -> float:
        """Sample the curve at time.

        Values are clamped to the first/last key outside the keyed range. A
        segment steps (holds the earlier value) when either side is CONSTANT,
        otherwise it ramps linearly.
        """
        if not self._keys:
            return 0.0
        if time <= self._keys[0].time:
            return self._keys[0].value
        if time >= self._keys[-1].time:
            return self._keys[-1].value
        i = self._insert_index(time)
        a, b = self._keys[i - 1], self._keys[i]
        if a.right is TangentMode.CONSTANT or b.left is TangentMode.CONSTANT:
            return a.value
        span = b.time - a.time
        if span <= 0:
            return b.value
        u = (time - a.time) / span
        return a.value + (b.value - a.value) * u
