"""
Instrument and tuning tables.

String instruments store open-string pitch classes and octaves per
string count, highest string first. Keyboards use the same shape with
one entry per key, generated chromatically from a start note.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np

from theorylab.core.exceptions import UnknownInstrumentError
from theorylab.music.notes import CHROMATIC_SHARPS

PIANO = 'piano'


@dataclass(frozen=True)
class TuningStrings:
    """Open notes, display names and octaves for one string (or key) count."""
    notes: Tuple[int, ...]
    string_names: Tuple[str, ...]
    octaves: Tuple[int, ...]

    def __post_init__(self) -> None:
        if not (len(self.notes) == len(self.string_names) == len(self.octaves)):
            raise ValueError(
                f"Tuning table lengths differ: {len(self.notes)} notes, "
                f"{len(self.string_names)} names, {len(self.octaves)} octaves"
            )
        for note in self.notes:
            if not (0 <= note <= 11):
                raise ValueError(f"Open note {note} out of range [0, 11]")

    def __len__(self) -> int:
        return len(self.notes)


@dataclass(frozen=True)
class Tuning:
    """Named tuning keyed by string count."""
    id: str
    name: str
    strings: Mapping[int, TuningStrings]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'strings', MappingProxyType(dict(self.strings)))
        for count, entry in self.strings.items():
            if len(entry) != count:
                raise ValueError(
                    f"Tuning {self.id!r}: entry for {count} strings has {len(entry)}"
                )

    def for_count(self, count: int) -> Optional[TuningStrings]:
        """Return the entry for a string count, or None."""
        return self.strings.get(count)


@dataclass(frozen=True)
class Instrument:
    """An instrument, its default tuning and the string/key counts it offers."""
    id: str
    name: str
    default_tuning: str
    supported_string_counts: Tuple[int, ...]
    is_keyboard: bool = False


def _strings(notes: List[int], names: List[str], octaves: List[int]) -> TuningStrings:
    return TuningStrings(tuple(notes), tuple(names), tuple(octaves))


def generate_piano_keys(key_count: int, start_note: int, start_octave: int) -> TuningStrings:
    """
    Build a chromatic run of keys.

    Args:
        key_count: Number of keys
        start_note: Pitch class of the lowest key
        start_octave: Octave of the lowest key

    Returns:
        Table with one entry per key, lowest first
    """
    semitones = np.arange(start_note, start_note + key_count)
    notes = semitones % 12
    octaves = start_octave + semitones // 12
    return TuningStrings(
        notes=tuple(int(n) for n in notes),
        string_names=tuple(CHROMATIC_SHARPS[int(n)] for n in notes),
        octaves=tuple(int(o) for o in octaves),
    )


INSTRUMENTS: Tuple[Instrument, ...] = (
    Instrument('guitar', 'Guitar', 'standardGuitar', (6, 7, 8)),
    Instrument('bassGuitar', 'Bass Guitar', 'standard', (4, 5, 6)),
    # 88, 61, 49, 37 and 25-key keyboards
    Instrument(PIANO, 'Piano/Keyboard', 'standard88', (88, 61, 49, 37, 25), is_keyboard=True),
)

# Standard bass plays back as E2-A2-D3-G3
BASS_TUNINGS: Mapping[str, Tuning] = MappingProxyType({
    'standard': Tuning('standard', 'Standard', {
        4: _strings([7, 2, 9, 4], ['G', 'D', 'A', 'E'], [3, 3, 2, 2]),
        5: _strings([7, 2, 9, 4, 11], ['G', 'D', 'A', 'E', 'B'], [3, 3, 2, 2, 1]),
        6: _strings([0, 7, 2, 9, 4, 11], ['C', 'G', 'D', 'A', 'E', 'B'], [4, 3, 3, 2, 2, 1]),
    }),
    'dropD': Tuning('dropD', 'Drop D', {
        4: _strings([7, 2, 9, 2], ['G', 'D', 'A', 'D'], [3, 3, 2, 2]),
        5: _strings([7, 2, 9, 2, 9], ['G', 'D', 'A', 'D', 'A'], [3, 3, 2, 2, 2]),
        6: _strings([7, 2, 9, 2, 9, 4], ['G', 'D', 'A', 'D', 'A', 'E'], [3, 3, 2, 2, 2, 2]),
    }),
    'halfStep': Tuning('halfStep', 'Half Step Down', {
        4: _strings([6, 1, 8, 3], ['Gb', 'Db', 'Ab', 'Eb'], [3, 3, 2, 2]),
        5: _strings([6, 1, 8, 3, 10], ['Gb', 'Db', 'Ab', 'Eb', 'Bb'], [3, 3, 2, 2, 1]),
        6: _strings([6, 1, 8, 3, 10, 5], ['Gb', 'Db', 'Ab', 'Eb', 'Bb', 'F'], [3, 3, 2, 2, 1, 2]),
    }),
    'wholeStep': Tuning('wholeStep', 'Whole Step Down', {
        4: _strings([5, 0, 7, 2], ['F', 'C', 'G', 'D'], [3, 3, 2, 2]),
        5: _strings([5, 0, 7, 2, 9], ['F', 'C', 'G', 'D', 'A'], [3, 3, 2, 2, 2]),
        6: _strings([5, 0, 7, 2, 9, 4], ['F', 'C', 'G', 'D', 'A', 'E'], [4, 3, 3, 2, 2, 2]),
    }),
    'fifths': Tuning('fifths', 'All Fifths', {
        4: _strings([9, 2, 7, 0], ['A', 'D', 'G', 'C'], [2, 3, 3, 4]),
        5: _strings([9, 2, 7, 0, 5], ['A', 'D', 'G', 'C', 'F'], [2, 3, 3, 4, 4]),
        6: _strings([9, 2, 7, 0, 5, 10], ['A', 'D', 'G', 'C', 'F', 'Bb'], [2, 3, 3, 4, 4, 4]),
    }),
})

GUITAR_TUNINGS: Mapping[str, Tuning] = MappingProxyType({
    'standardGuitar': Tuning('standardGuitar', 'Standard', {
        6: _strings([4, 11, 7, 2, 9, 4], ['E', 'B', 'G', 'D', 'A', 'E'], [4, 3, 3, 3, 2, 2]),
        7: _strings([4, 11, 7, 2, 9, 4, 11], ['E', 'B', 'G', 'D', 'A', 'E', 'B'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([4, 11, 7, 2, 9, 4, 11, 6], ['E', 'B', 'G', 'D', 'A', 'E', 'B', 'F#'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
    'dropDGuitar': Tuning('dropDGuitar', 'Drop D', {
        6: _strings([4, 11, 7, 2, 9, 2], ['E', 'B', 'G', 'D', 'A', 'D'], [4, 3, 3, 3, 2, 2]),
        7: _strings([4, 11, 7, 2, 9, 2, 9], ['E', 'B', 'G', 'D', 'A', 'D', 'A'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([4, 11, 7, 2, 9, 2, 9, 4], ['E', 'B', 'G', 'D', 'A', 'D', 'A', 'E'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
    'halfStepGuitar': Tuning('halfStepGuitar', 'Half Step Down', {
        6: _strings([3, 10, 6, 1, 8, 3], ['Eb', 'Bb', 'Gb', 'Db', 'Ab', 'Eb'], [4, 3, 3, 3, 2, 2]),
        7: _strings([3, 10, 6, 1, 8, 3, 10], ['Eb', 'Bb', 'Gb', 'Db', 'Ab', 'Eb', 'Bb'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([3, 10, 6, 1, 8, 3, 10, 5], ['Eb', 'Bb', 'Gb', 'Db', 'Ab', 'Eb', 'Bb', 'F'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
    'wholeStepGuitar': Tuning('wholeStepGuitar', 'Whole Step Down', {
        6: _strings([2, 9, 5, 0, 7, 2], ['D', 'A', 'F', 'C', 'G', 'D'], [4, 3, 3, 3, 2, 2]),
        7: _strings([2, 9, 5, 0, 7, 2, 9], ['D', 'A', 'F', 'C', 'G', 'D', 'A'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([2, 9, 5, 0, 7, 2, 9, 4], ['D', 'A', 'F', 'C', 'G', 'D', 'A', 'E'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
    'openDGuitar': Tuning('openDGuitar', 'Open D', {
        6: _strings([2, 9, 6, 2, 9, 2], ['D', 'A', 'F#', 'D', 'A', 'D'], [4, 3, 3, 3, 2, 2]),
        7: _strings([2, 9, 6, 2, 9, 2, 9], ['D', 'A', 'F#', 'D', 'A', 'D', 'A'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([2, 9, 6, 2, 9, 2, 9, 2], ['D', 'A', 'F#', 'D', 'A', 'D', 'A', 'D'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
    'openGGuitar': Tuning('openGGuitar', 'Open G', {
        6: _strings([2, 11, 7, 2, 7, 2], ['D', 'B', 'G', 'D', 'G', 'D'], [4, 3, 3, 3, 2, 2]),
        7: _strings([2, 11, 7, 2, 7, 2, 7], ['D', 'B', 'G', 'D', 'G', 'D', 'G'], [4, 3, 3, 3, 2, 2, 1]),
        8: _strings([2, 11, 7, 2, 7, 2, 7, 2], ['D', 'B', 'G', 'D', 'G', 'D', 'G', 'D'], [4, 3, 3, 3, 2, 2, 1, 1]),
    }),
})

PIANO_TUNINGS: Mapping[str, Tuning] = MappingProxyType({
    'standard88': Tuning('standard88', '88 Keys (Full)', {88: generate_piano_keys(88, 9, 0)}),  # A0 to C8
    'standard61': Tuning('standard61', '61 Keys', {61: generate_piano_keys(61, 0, 2)}),  # C2 to C7
    'standard49': Tuning('standard49', '49 Keys', {49: generate_piano_keys(49, 0, 2)}),  # C2 to C6
    'standard37': Tuning('standard37', '37 Keys', {37: generate_piano_keys(37, 0, 3)}),  # C3 to C6
    'standard25': Tuning('standard25', '25 Keys', {25: generate_piano_keys(25, 0, 3)}),  # C3 to C5
})

_TUNINGS_BY_INSTRUMENT: Dict[str, Mapping[str, Tuning]] = {
    'guitar': GUITAR_TUNINGS,
    'bassGuitar': BASS_TUNINGS,
    PIANO: PIANO_TUNINGS,
}


def get_instrument(instrument_id: str) -> Instrument:
    """
    Get an instrument by id.

    Raises:
        UnknownInstrumentError: If the id is not defined
    """
    for instrument in INSTRUMENTS:
        if instrument.id == instrument_id:
            return instrument
    raise UnknownInstrumentError(instrument_id)


def tunings_for_instrument(instrument_id: str) -> Dict[str, Tuning]:
    """Tuning table shown for an instrument; empty for unknown ids."""
    return dict(_TUNINGS_BY_INSTRUMENT.get(instrument_id, {}))
