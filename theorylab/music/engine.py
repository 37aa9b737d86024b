"""
Music-theory engine.

Maps the current selection (key, scale or chord, instrument, tuning)
onto a fretboard grid or keyboard row, and formats formulas and labels
for display.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple, Union

from theorylab.core.config import Settings, settings as default_settings
from theorylab.core.exceptions import UnknownCategoryError, UnknownInstrumentError
from theorylab.core.logging import get_logger
from theorylab.music.catalog import (
    CATEGORIES,
    FRETBOARD_NOTES,
    Category,
    Definition,
    DefinitionKind,
    get_category,
)
from theorylab.music.instruments import (
    INSTRUMENTS,
    PIANO,
    Instrument,
    Tuning,
    TuningStrings,
    get_instrument,
    tunings_for_instrument,
)
from theorylab.music.notes import (
    CHROMATIC_COMBINED,
    FLAT_KEYS,
    NOT_FOUND,
    compute_note_index,
    get_note_name,
    interval_label,
    is_accidental,
    midi_to_frequency,
    nashville_number,
    note_to_midi,
)
from theorylab.music.state import SelectionState

logger = get_logger(__name__)

StateListener = Callable[[SelectionState], None]

ALL_NOTES = (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11)
NATURAL_NOTES = (0, 2, 4, 5, 7, 9, 11)
ACCIDENTAL_NOTES = (1, 3, 6, 8, 10)

# Key-independent pseudo-scales in the fretboard notes category
_PSEUDO_SCALE_NOTES: Dict[str, Tuple[int, ...]] = {
    'allNotesSharp': ALL_NOTES,
    'allNotesFlat': ALL_NOTES,
    'naturalNotes': NATURAL_NOTES,
    'sharps': ACCIDENTAL_NOTES,
    'flats': ACCIDENTAL_NOTES,
}

_PSEUDO_SCALE_FORMULAS: Dict[str, str] = {
    'allNotesSharp': "All 12 notes of the chromatic scale",
    'allNotesFlat': "All 12 notes of the chromatic scale",
    'naturalNotes': "C - D - E - F - G - A - B",
    'sharps': "C# - D# - F# - G# - A#",
    'flats': "Db - Eb - Gb - Ab - Bb",
}

_FORCE_SHARPS = frozenset({'allNotesSharp', 'sharps'})
_FORCE_FLATS = frozenset({'allNotesFlat', 'flats'})


@dataclass(frozen=True)
class FretNote:
    """
    One rendered cell: a fret on a string, or a key on a keyboard.

    Attributes:
        fret: Fret number (string instruments) or key index (keyboards)
        note_value: Pitch class 0-11
        note_name: Spelling under the current notation
        octave: Scientific pitch octave
        nashville_number: Scale degree relative to the selected key
        is_root: Pitch class equals the selected key
        is_in_mode: Pitch class belongs to the selected scale or chord
    """
    fret: int
    note_value: int
    note_name: str
    octave: int
    nashville_number: str
    is_root: bool
    is_in_mode: bool

    @property
    def is_black_key(self) -> bool:
        return is_accidental(self.note_name)

    @property
    def scientific_name(self) -> str:
        """Name with octave, e.g. 'F#3'."""
        return f"{self.note_name}{self.octave}"

    @property
    def midi_note(self) -> int:
        return note_to_midi(self.note_value, self.octave)

    @property
    def frequency(self) -> float:
        return midi_to_frequency(self.midi_note)


class MusicTheoryEngine:
    """
    Owns a SelectionState and derives fretboard and keyboard layouts from it.

    All state changes go through the setters, which recompute dependent
    defaults (changing instrument resets tuning and string count) and notify
    registered listeners. Query methods never mutate state.
    """

    def __init__(
        self,
        state: Optional[SelectionState] = None,
        config: Optional[Settings] = None
    ):
        """
        Initialize engine.

        Args:
            state: Initial selection; built from configuration if omitted
            config: Settings to read defaults and fret range from
        """
        self.config = config or default_settings
        self.max_fret = self.config.max_fret

        if state is None:
            state = self._initial_state()
        self._state = state
        self._tunings = tunings_for_instrument(state.selected_instrument)
        self._listeners: List[StateListener] = []

        logger.info(
            "music_theory_engine_initialized",
            instrument=state.selected_instrument,
            tuning=state.selected_tuning,
            string_count=state.selected_string_count
        )

    def _initial_state(self) -> SelectionState:
        fallback = SelectionState()
        tuning, count = fallback.selected_tuning, fallback.selected_string_count
        try:
            instrument = get_instrument(self.config.default_instrument)
            tuning, count = self._instrument_defaults(instrument)
        except UnknownInstrumentError as e:
            logger.warning("unknown_default_instrument", instrument_id=e.instrument_id)

        return SelectionState(
            selected_key=self.config.default_key,
            selected_category=self.config.default_category,
            selected_item=self.config.default_item,
            selected_instrument=self.config.default_instrument,
            selected_tuning=tuning,
            selected_string_count=count,
        )

    def _instrument_defaults(self, instrument: Instrument) -> Tuple[str, int]:
        """Default tuning id and string count for an instrument."""
        if instrument.id == PIANO:
            # Keyboards open on the configured key count, not the full 88
            count = self.config.piano_default_key_count
            for tuning in tunings_for_instrument(instrument.id).values():
                if tuning.for_count(count) is not None:
                    return tuning.id, count
        return instrument.default_tuning, instrument.supported_string_counts[0]

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> SelectionState:
        return self._state

    def subscribe(self, listener: StateListener) -> None:
        """Register a callable invoked with the new state after every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _update(self, **changes) -> bool:
        """Swap in the changed state; returns False when nothing changed."""
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return False
        self._state = new_state
        self._notify()
        return True

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error("state_listener_error", error=str(e))

    def set_key(self, key: Union[int, str]) -> None:
        """Select the key by name ('F#', 'C#/Db') or pitch class index."""
        self._update(selected_key=key)

    def set_category(self, category_id: str) -> None:
        """
        Select a category and its first item.

        Unknown ids leave the selection unchanged.
        """
        try:
            category = get_category(category_id)
        except UnknownCategoryError as e:
            logger.warning("unknown_category", category_id=e.category_id)
            return

        first_item = category.items[0].id if category.items else ''
        self._update(selected_category=category.id, selected_item=first_item)

    def set_item(self, item_id: str) -> None:
        self._update(selected_item=item_id)

    def set_instrument(self, instrument_id: str) -> None:
        """
        Switch instrument, loading its tunings and resetting tuning and
        string count to the instrument's defaults.

        Unknown ids leave the selection unchanged.
        """
        try:
            instrument = get_instrument(instrument_id)
        except UnknownInstrumentError as e:
            logger.warning("unknown_instrument", instrument_id=e.instrument_id)
            return

        self._tunings = tunings_for_instrument(instrument.id)
        tuning, count = self._instrument_defaults(instrument)
        changed = self._update(
            selected_instrument=instrument.id,
            selected_tuning=tuning,
            selected_string_count=count,
        )
        if not changed:
            return

        logger.info(
            "instrument_changed",
            instrument_id=instrument.id,
            tuning=tuning,
            string_count=count
        )

    def set_tuning(self, tuning_id: str) -> None:
        self._update(selected_tuning=tuning_id)

    def set_string_count(self, count: int) -> None:
        self._update(selected_string_count=count)

    def toggle_nashville_numbers(self) -> None:
        self._update(show_nashville_numbers=not self._state.show_nashville_numbers)

    # ---------------------------------------------------------------- lookups

    def instruments(self) -> Tuple[Instrument, ...]:
        return INSTRUMENTS

    def current_instrument(self) -> Optional[Instrument]:
        try:
            return get_instrument(self._state.selected_instrument)
        except UnknownInstrumentError:
            return None

    def categories(self) -> Tuple[Category, ...]:
        return CATEGORIES

    def current_category(self) -> Optional[Category]:
        try:
            return get_category(self._state.selected_category)
        except UnknownCategoryError:
            return None

    def current_items(self) -> Tuple[Definition, ...]:
        category = self.current_category()
        return category.items if category else ()

    def current_item(self) -> Optional[Definition]:
        category = self.current_category()
        return category.find(self._state.selected_item) if category else None

    def is_chord_category(self) -> bool:
        category = self.current_category()
        return category is not None and category.kind is DefinitionKind.CHORD

    def tunings(self) -> Dict[str, Tuning]:
        """Tunings available for the selected instrument."""
        return dict(self._tunings)

    def chromatic_scale(self) -> List[str]:
        """Combined sharp/flat spellings, as offered by key pickers."""
        return list(CHROMATIC_COMBINED)

    def _pseudo_scale(self) -> Optional[str]:
        """Selected fretboard-notes pseudo-scale id, if any."""
        state = self._state
        if state.selected_category == FRETBOARD_NOTES and state.selected_item in _PSEUDO_SCALE_NOTES:
            return state.selected_item
        return None

    def is_key_disabled(self) -> bool:
        """True when the selection ignores the key."""
        return self._pseudo_scale() is not None

    # ---------------------------------------------------------------- notation

    def should_use_sharps(self) -> bool:
        """
        Decide between sharp and flat spelling.

        Resolution order:
            1. explicit sharp/flat pseudo-scale selection
            2. key in the flat-key set prefers flats
            3. key spelled with an accidental mirrors it
            4. the definition's own preference, defaulting to sharps

        Keys given as a pitch class index carry no spelling and skip 2 and 3.
        """
        state = self._state
        item = self.current_item()
        if item is None:
            return True

        if state.selected_category == FRETBOARD_NOTES:
            if state.selected_item in _FORCE_SHARPS:
                return True
            if state.selected_item in _FORCE_FLATS:
                return False

        key = state.selected_key
        if isinstance(key, str):
            if key in FLAT_KEYS:
                return False

            if '#' in key or 'b' in key:
                return '#' in key

        return item.prefer_sharps if item.prefer_sharps is not None else True

    def compute_note_index(self, name: Union[int, str]) -> int:
        return compute_note_index(name)

    def note_name(self, note_index: int) -> str:
        """Spell a pitch class under the current notation."""
        return get_note_name(note_index, self.should_use_sharps())

    def nashville_number(self, note_index: int, key_index: int) -> str:
        return nashville_number(note_index, key_index)

    def _key_index(self) -> int:
        return compute_note_index(self._state.selected_key)

    def key_name(self) -> str:
        """Selected key as written; index keys are spelled under the current notation."""
        key = self._state.selected_key
        if isinstance(key, str):
            return key
        key_index = compute_note_index(key)
        return self.note_name(key_index) if key_index != NOT_FOUND else ''

    # ----------------------------------------------------------------- layout

    def selected_note_set(self) -> List[int]:
        """
        Pitch classes of the selected scale or chord.

        Pseudo-scales return a fixed list regardless of key. Otherwise one
        entry per interval, in interval order; duplicates are kept.
        """
        item = self.current_item()
        if item is None:
            return []

        pseudo = self._pseudo_scale()
        if pseudo is not None:
            return list(_PSEUDO_SCALE_NOTES[pseudo])

        key_index = self._key_index()
        if key_index == NOT_FOUND:
            logger.warning("unknown_key", key=self._state.selected_key)
            return []

        return [(key_index + interval) % 12 for interval in item.intervals]

    def _active_strings(self) -> Optional[TuningStrings]:
        state = self._state
        tuning = self._tunings.get(state.selected_tuning)
        if tuning is None:
            logger.warning(
                "tuning_not_available",
                instrument=state.selected_instrument,
                tuning=state.selected_tuning
            )
            return None

        strings = tuning.for_count(state.selected_string_count)
        if strings is None:
            logger.warning(
                "string_count_not_available",
                tuning=state.selected_tuning,
                string_count=state.selected_string_count
            )
        return strings

    def _make_cell(
        self,
        position: int,
        note_value: int,
        octave: int,
        key_index: int,
        mode_notes: frozenset,
        use_sharps: bool
    ) -> FretNote:
        in_key = key_index != NOT_FOUND
        return FretNote(
            fret=position,
            note_value=note_value,
            note_name=get_note_name(note_value, use_sharps),
            octave=octave,
            nashville_number=nashville_number(note_value, key_index) if in_key else '',
            is_root=in_key and note_value == key_index,
            is_in_mode=note_value in mode_notes,
        )

    def generate_fretboard(self) -> List[List[FretNote]]:
        """
        Build the fretboard grid.

        Returns:
            One row per string (highest first), each with frets 0..max_fret.
            Empty if the tuning has no entry for the string count.
        """
        strings = self._active_strings()
        if strings is None:
            return []

        key_index = self._key_index()
        mode_notes = frozenset(self.selected_note_set())
        use_sharps = self.should_use_sharps()

        fretboard = []
        for open_note, open_octave in zip(strings.notes, strings.octaves):
            row = []
            for fret in range(self.max_fret + 1):
                absolute = open_note + fret
                row.append(self._make_cell(
                    fret,
                    absolute % 12,
                    open_octave + absolute // 12,
                    key_index,
                    mode_notes,
                    use_sharps
                ))
            fretboard.append(row)

        logger.debug(
            "fretboard_generated",
            strings=len(fretboard),
            frets=self.max_fret + 1
        )
        return fretboard

    def generate_keyboard(self) -> List[FretNote]:
        """
        Build the keyboard row, lowest key first.

        Returns:
            One cell per key; empty if the tuning has no entry for the key count.
        """
        keys = self._active_strings()
        if keys is None:
            return []

        key_index = self._key_index()
        mode_notes = frozenset(self.selected_note_set())
        use_sharps = self.should_use_sharps()

        return [
            self._make_cell(position, note, octave, key_index, mode_notes, use_sharps)
            for position, (note, octave) in enumerate(zip(keys.notes, keys.octaves))
        ]

    # ------------------------------------------------------------- formatting

    def formula_as_note_names(self) -> str:
        """
        Selected scale or chord spelled from the key, e.g. 'A - B - C - D'.

        With Nashville numbers on, each note carries its degree: 'A (1) - B (2)'.
        """
        item = self.current_item()
        if item is None:
            return ''

        pseudo = self._pseudo_scale()
        if pseudo is not None:
            return _PSEUDO_SCALE_FORMULAS[pseudo]

        key_index = self._key_index()
        if key_index == NOT_FOUND:
            return ''

        use_sharps = self.should_use_sharps()
        parts = []
        for interval in item.intervals:
            name = get_note_name((key_index + interval) % 12, use_sharps)
            if self._state.show_nashville_numbers:
                name = f"{name} ({interval_label(interval)})"
            parts.append(name)
        return ' - '.join(parts)

    def formula_as_degree_numbers(self) -> str:
        """Selected scale or chord as scale degrees, e.g. '1 - 2 - b3 - 5'."""
        item = self.current_item()
        if item is None or self.is_key_disabled():
            return ''
        return ' - '.join(interval_label(interval) for interval in item.intervals)

    def display_name(self) -> str:
        """Chord symbol on the key ('Gmaj7') or the scale's name."""
        item = self.current_item()
        if item is None:
            return ''
        if item.is_chord and item.symbol is not None:
            return f"{self.key_name()}{item.symbol}"
        return item.name

    def get_state(self) -> Dict:
        """Get selection and derived labels as dictionary."""
        return {
            **self._state.to_dict(),
            'display_name': self.display_name(),
            'formula': self.formula_as_note_names(),
            'degrees': self.formula_as_degree_numbers(),
            'use_sharps': self.should_use_sharps(),
            'key_disabled': self.is_key_disabled(),
        }
