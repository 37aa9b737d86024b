"""
Scale and chord catalog.

Static definitions grouped into categories. Built once at import time
and never mutated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from theorylab.core.exceptions import UnknownCategoryError, UnknownItemError

# Category holding the key-independent pseudo-scales
FRETBOARD_NOTES = 'fretboardNotes'


class DefinitionKind(Enum):
    """Whether a definition describes a scale/mode or a chord."""
    SCALE = "scale"
    CHORD = "chord"


@dataclass(frozen=True)
class Definition:
    """
    A scale or chord as an ordered set of semitone offsets from its root.

    Intervals may exceed 11 (compound intervals such as 14 for a 9th).
    Scales carry a spelling preference; chords carry a symbol.
    """
    id: str
    name: str
    intervals: Tuple[int, ...]
    kind: DefinitionKind
    prefer_sharps: Optional[bool] = None
    symbol: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Definition.id must not be empty")
        if not self.intervals:
            raise ValueError(f"Definition {self.id!r} has no intervals")
        if any(interval < 0 for interval in self.intervals):
            raise ValueError(f"Definition {self.id!r} has negative intervals")

    @property
    def is_chord(self) -> bool:
        return self.kind is DefinitionKind.CHORD


@dataclass(frozen=True)
class Category:
    """Named group of definitions of a single kind."""
    id: str
    name: str
    kind: DefinitionKind
    items: Tuple[Definition, ...]

    def __post_init__(self) -> None:
        for item in self.items:
            if item.kind is not self.kind:
                raise ValueError(
                    f"Category {self.id!r} mixes kinds: {item.id!r} is a {item.kind.value}"
                )

    @property
    def item_label(self) -> str:
        """Label for the item picker."""
        return "Chord" if self.kind is DefinitionKind.CHORD else "Scale/Mode"

    def find(self, item_id: str) -> Optional[Definition]:
        """Return the item with the given id, or None."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None


def _scale(id: str, name: str, intervals: List[int], prefer_sharps: bool) -> Definition:
    return Definition(id, name, tuple(intervals), DefinitionKind.SCALE, prefer_sharps=prefer_sharps)


def _chord(id: str, name: str, intervals: List[int], symbol: str) -> Definition:
    return Definition(id, name, tuple(intervals), DefinitionKind.CHORD, symbol=symbol)


def _category(id: str, name: str, kind: DefinitionKind, items: List[Definition]) -> Category:
    return Category(id, name, kind, tuple(items))


SCALE_CATEGORIES: Tuple[Category, ...] = (
    _category(FRETBOARD_NOTES, 'Fretboard Notes', DefinitionKind.SCALE, [
        _scale('allNotesSharp', 'All Notes (Sharps)', [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11], True),
        _scale('allNotesFlat', 'All Notes (Flats)', [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11], False),
        _scale('naturalNotes', 'Natural Notes (No Sharps/Flats)', [0, 2, 4, 5, 7, 9, 11], True),
        _scale('sharps', 'Sharp Notes', [1, 3, 6, 8, 10], True),
        _scale('flats', 'Flat Notes', [1, 3, 6, 8, 10], False),
    ]),
    _category('diatonicModes', 'Diatonic Modes', DefinitionKind.SCALE, [
        _scale('ionian', 'Ionian (Major)', [0, 2, 4, 5, 7, 9, 11], True),
        _scale('dorian', 'Dorian', [0, 2, 3, 5, 7, 9, 10], False),
        _scale('phrygian', 'Phrygian', [0, 1, 3, 5, 7, 8, 10], False),
        _scale('lydian', 'Lydian', [0, 2, 4, 6, 7, 9, 11], True),
        _scale('mixolydian', 'Mixolydian', [0, 2, 4, 5, 7, 9, 10], True),
        _scale('aeolian', 'Aeolian (Natural Minor)', [0, 2, 3, 5, 7, 8, 10], False),
        _scale('locrian', 'Locrian', [0, 1, 3, 5, 6, 8, 10], False),
    ]),
    _category('pentatonicScales', 'Pentatonic Scales', DefinitionKind.SCALE, [
        _scale('majorPentatonic', 'Major Pentatonic', [0, 2, 4, 7, 9], True),
        _scale('minorPentatonic', 'Minor Pentatonic', [0, 3, 5, 7, 10], False),
    ]),
    _category('bluesScales', 'Blues Scales', DefinitionKind.SCALE, [
        _scale('majorBlues', 'Major Blues', [0, 2, 3, 4, 7, 9], True),
        _scale('minorBlues', 'Minor Blues', [0, 3, 5, 6, 7, 10], False),
    ]),
    _category('otherScales', 'Other Scales', DefinitionKind.SCALE, [
        _scale('harmonicMinor', 'Harmonic Minor', [0, 2, 3, 5, 7, 8, 11], False),
        _scale('melodicMinor', 'Melodic Minor', [0, 2, 3, 5, 7, 9, 11], False),
        _scale('wholeTone', 'Whole Tone', [0, 2, 4, 6, 8, 10], True),
        _scale('diminished', 'Diminished (H-W)', [0, 1, 3, 4, 6, 7, 9, 10], False),
        _scale('augmented', 'Augmented', [0, 3, 4, 7, 8, 11], True),
    ]),
    _category('exoticScales', 'Exotic & World Scales', DefinitionKind.SCALE, [
        _scale('hungarianMinor', 'Hungarian Minor', [0, 2, 3, 6, 7, 8, 11], False),
        _scale('hungarianMajor', 'Hungarian Major', [0, 3, 4, 6, 7, 9, 10], True),
        _scale('doubleHarmonic', 'Double Harmonic (Byzantine)', [0, 1, 4, 5, 7, 8, 11], False),
        _scale('phrygianDominant', 'Phrygian Dominant', [0, 1, 4, 5, 7, 8, 10], False),
        _scale('neapolitanMinor', 'Neapolitan Minor', [0, 1, 3, 5, 7, 8, 11], False),
        _scale('neapolitanMajor', 'Neapolitan Major', [0, 1, 3, 5, 7, 9, 11], False),
        _scale('enigmatic', 'Enigmatic', [0, 1, 4, 6, 8, 10, 11], True),
        _scale('persian', 'Persian', [0, 1, 4, 5, 6, 8, 11], False),
        _scale('arabic', 'Arabic (Major Locrian)', [0, 2, 4, 5, 6, 8, 10], False),
        _scale('japanese', 'Japanese (Hirajoshi)', [0, 2, 3, 7, 8], False),
        _scale('inSen', 'In-Sen', [0, 1, 5, 7, 10], False),
        _scale('iwato', 'Iwato', [0, 1, 5, 6, 10], False),
    ]),
    _category('melodicMinorModes', 'Melodic Minor Modes', DefinitionKind.SCALE, [
        _scale('melodicMinorMode1', 'Melodic Minor', [0, 2, 3, 5, 7, 9, 11], False),
        _scale('dorianB2', 'Dorian ♭2 (Phrygian #6)', [0, 1, 3, 5, 7, 9, 10], False),
        _scale('lydianAugmented', 'Lydian Augmented', [0, 2, 4, 6, 8, 9, 11], True),
        _scale('lydianDominant', 'Lydian Dominant', [0, 2, 4, 6, 7, 9, 10], True),
        _scale('mixolydianB6', 'Mixolydian ♭6', [0, 2, 4, 5, 7, 8, 10], True),
        _scale('locrianNat2', 'Locrian ♮2 (Half-Diminished)', [0, 2, 3, 5, 6, 8, 10], False),
        _scale('superLocrian', 'Super Locrian (Altered)', [0, 1, 3, 4, 6, 8, 10], False),
    ]),
    _category('harmonicMinorModes', 'Harmonic Minor Modes', DefinitionKind.SCALE, [
        _scale('harmonicMinorMode1', 'Harmonic Minor', [0, 2, 3, 5, 7, 8, 11], False),
        _scale('locrianNat6', 'Locrian ♮6', [0, 1, 3, 5, 6, 9, 10], False),
        _scale('ionianAugmented', 'Ionian Augmented', [0, 2, 4, 5, 8, 9, 11], True),
        _scale('dorianSharp4', 'Dorian #4 (Romanian)', [0, 2, 3, 6, 7, 9, 10], False),
        _scale('phrygianDominantMode', 'Phrygian Dominant', [0, 1, 4, 5, 7, 8, 10], False),
        _scale('lydianSharp2', 'Lydian #2', [0, 3, 4, 6, 7, 9, 11], True),
        _scale('ultraLocrian', 'Ultra Locrian', [0, 1, 3, 4, 6, 8, 9], False),
    ]),
    _category('bebopScales', 'Bebop Scales', DefinitionKind.SCALE, [
        _scale('bebopDominant', 'Bebop Dominant', [0, 2, 4, 5, 7, 9, 10, 11], True),
        _scale('bebopMajor', 'Bebop Major', [0, 2, 4, 5, 7, 8, 9, 11], True),
        _scale('bebopMinor', 'Bebop Minor', [0, 2, 3, 5, 7, 8, 9, 10], False),
        _scale('bebopDorian', 'Bebop Dorian', [0, 2, 3, 4, 5, 7, 9, 10], False),
    ]),
)

CHORD_CATEGORIES: Tuple[Category, ...] = (
    _category('triads', 'Triads', DefinitionKind.CHORD, [
        _chord('major', 'Major', [0, 4, 7], ''),
        _chord('minor', 'Minor', [0, 3, 7], 'm'),
        _chord('diminished', 'Diminished', [0, 3, 6], 'dim'),
        _chord('augmented', 'Augmented', [0, 4, 8], 'aug'),
        _chord('sus2', 'Suspended 2nd', [0, 2, 7], 'sus2'),
        _chord('sus4', 'Suspended 4th', [0, 5, 7], 'sus4'),
    ]),
    _category('seventh', 'Seventh Chords', DefinitionKind.CHORD, [
        _chord('major7', 'Major 7th', [0, 4, 7, 11], 'maj7'),
        _chord('dominant7', 'Dominant 7th', [0, 4, 7, 10], '7'),
        _chord('minor7', 'Minor 7th', [0, 3, 7, 10], 'm7'),
        _chord('minorMajor7', 'Minor Major 7th', [0, 3, 7, 11], 'mMaj7'),
        _chord('diminished7', 'Diminished 7th', [0, 3, 6, 9], 'dim7'),
        _chord('halfDiminished7', 'Half Diminished 7th', [0, 3, 6, 10], 'm7b5'),
        _chord('augmented7', 'Augmented 7th', [0, 4, 8, 10], '7#5'),
        _chord('augmentedMajor7', 'Augmented Major 7th', [0, 4, 8, 11], 'maj7#5'),
    ]),
    _category('extended', 'Extended Chords', DefinitionKind.CHORD, [
        _chord('major9', 'Major 9th', [0, 4, 7, 11, 14], 'maj9'),
        _chord('dominant9', 'Dominant 9th', [0, 4, 7, 10, 14], '9'),
        _chord('minor9', 'Minor 9th', [0, 3, 7, 10, 14], 'm9'),
        _chord('major11', 'Major 11th', [0, 4, 7, 11, 14, 17], 'maj11'),
        _chord('dominant11', 'Dominant 11th', [0, 4, 7, 10, 14, 17], '11'),
        _chord('minor11', 'Minor 11th', [0, 3, 7, 10, 14, 17], 'm11'),
        _chord('major13', 'Major 13th', [0, 4, 7, 11, 14, 17, 21], 'maj13'),
        _chord('dominant13', 'Dominant 13th', [0, 4, 7, 10, 14, 17, 21], '13'),
        _chord('minor13', 'Minor 13th', [0, 3, 7, 10, 14, 17, 21], 'm13'),
    ]),
    _category('alterations', 'Altered Chords', DefinitionKind.CHORD, [
        _chord('7b9', '7th flat 9', [0, 4, 7, 10, 13], '7b9'),
        _chord('7sharp9', '7th sharp 9', [0, 4, 7, 10, 15], '7#9'),
        _chord('7b5', '7th flat 5', [0, 4, 6, 10], '7b5'),
        _chord('7sharp5', '7th sharp 5', [0, 4, 8, 10], '7#5'),
        _chord('add9', 'Add 9', [0, 4, 7, 14], 'add9'),
        _chord('minor_add9', 'Minor Add 9', [0, 3, 7, 14], 'madd9'),
        _chord('6', '6th', [0, 4, 7, 9], '6'),
        _chord('minor6', 'Minor 6th', [0, 3, 7, 9], 'm6'),
    ]),
)

# Scales first, then chords
CATEGORIES: Tuple[Category, ...] = SCALE_CATEGORIES + CHORD_CATEGORIES

_CATEGORIES_BY_ID: Dict[str, Category] = {category.id: category for category in CATEGORIES}


def get_category(category_id: str) -> Category:
    """
    Get a category by id.

    Args:
        category_id: Category id, e.g. 'diatonicModes'

    Returns:
        Category

    Raises:
        UnknownCategoryError: If the id is not in the catalog
    """
    if category_id not in _CATEGORIES_BY_ID:
        raise UnknownCategoryError(category_id)
    return _CATEGORIES_BY_ID[category_id]


def find_item(item_id: str) -> Tuple[Category, Definition]:
    """
    Find the first definition with the given id across all categories.

    Item ids are unique within a category but not across the catalog
    ('diminished' is both a scale and a chord); scales win.

    Raises:
        UnknownItemError: If no category holds the id
    """
    for category in CATEGORIES:
        item = category.find(item_id)
        if item is not None:
            return category, item
    raise UnknownItemError(item_id)
