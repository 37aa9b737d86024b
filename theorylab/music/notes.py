"""
Pitch-class tables and note naming utilities.

Provides the chromatic spellings, Nashville scale-degree labels and
MIDI/frequency conversions shared by the engine and the highlighter.
"""

from typing import List, Union

# Returned by compute_note_index for names outside every spelling table
NOT_FOUND = -1

CHROMATIC_COMBINED: List[str] = [
    'C', 'C#/Db', 'D', 'D#/Eb', 'E', 'F', 'F#/Gb', 'G', 'G#/Ab', 'A', 'A#/Bb', 'B'
]

CHROMATIC_SHARPS: List[str] = [
    'C', 'C#', 'D', 'D#', 'E', 'F', 'F#', 'G', 'G#', 'A', 'A#', 'B'
]

CHROMATIC_FLATS: List[str] = [
    'C', 'Db', 'D', 'Eb', 'E', 'F', 'Gb', 'G', 'Ab', 'A', 'Bb', 'B'
]

NASHVILLE_NUMBERS: List[str] = [
    '1', 'b2', '2', 'b3', '3', '4', '#4/b5', '5', 'b6', '6', 'b7', '7'
]

# Keys conventionally spelled with flats
FLAT_KEYS = frozenset({'F', 'Bb', 'Eb', 'Ab', 'Db', 'Gb', 'Cb'})


def compute_note_index(name: Union[int, str]) -> int:
    """
    Resolve a note name to its pitch class.

    Accepts combined ("C#/Db"), sharp-only ("C#") and flat-only ("Db")
    spellings, or a pitch class index which is returned as is.

    Args:
        name: Note name or pitch class

    Returns:
        Pitch class in [0, 11], or NOT_FOUND
    """
    if isinstance(name, int):
        return name if 0 <= name <= 11 else NOT_FOUND

    if '/' in name:
        return CHROMATIC_COMBINED.index(name) if name in CHROMATIC_COMBINED else NOT_FOUND

    if name in CHROMATIC_SHARPS:
        return CHROMATIC_SHARPS.index(name)
    if name in CHROMATIC_FLATS:
        return CHROMATIC_FLATS.index(name)
    return NOT_FOUND


def chromatic(use_sharps: bool) -> List[str]:
    """Return the sharp or flat chromatic spelling table."""
    return CHROMATIC_SHARPS if use_sharps else CHROMATIC_FLATS


def get_note_name(note_index: int, use_sharps: bool = True) -> str:
    """
    Spell a pitch class.

    Args:
        note_index: Pitch class (reduced mod 12)
        use_sharps: Spell accidentals as sharps instead of flats

    Returns:
        Note name, e.g. 'F#' or 'Gb'
    """
    return chromatic(use_sharps)[note_index % 12]


def nashville_number(note_index: int, key_index: int) -> str:
    """Scale-degree label of a note relative to a key."""
    interval = (note_index - key_index + 12) % 12
    return NASHVILLE_NUMBERS[interval]


def interval_label(interval: int) -> str:
    """Scale-degree label of an interval; compound intervals fold to one octave."""
    return NASHVILLE_NUMBERS[interval % 12]


def is_accidental(note_name: str) -> bool:
    """True for sharp/flat spellings (the black keys of a keyboard)."""
    return '#' in note_name or 'b' in note_name


def note_to_midi(note_index: int, octave: int) -> int:
    """
    Convert a pitch class and octave to a MIDI note number.

    Uses scientific pitch notation, so C4 is 60.
    """
    return (octave + 1) * 12 + note_index % 12



def midi_to_frequency(midi_note: int) -> float:
    """
    Convert MIDI note to frequency.

    Args:
        midi_note: MIDI note number

    Returns:
        Frequency in Hz
    """
    return 440.0 * (2.0 ** ((midi_note - 69) / 12.0))
