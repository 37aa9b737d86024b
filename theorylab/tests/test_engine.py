"""
Tests for the music-theory engine.

Tests selection setters, note sets, notation choice, fretboard and
keyboard generation, and formula formatting.
"""

from unittest.mock import MagicMock, patch

import pytest

from theorylab.core.config import Settings
from theorylab.music.catalog import CATEGORIES
from theorylab.music.engine import FretNote, MusicTheoryEngine
from theorylab.music.instruments import INSTRUMENTS, tunings_for_instrument
from theorylab.music.notes import CHROMATIC_FLATS, CHROMATIC_SHARPS
from theorylab.music.state import SelectionState


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """Create an engine with the default selection."""
    return MusicTheoryEngine()


def make_engine(**overrides) -> MusicTheoryEngine:
    """Create an engine from an explicit selection."""
    return MusicTheoryEngine(state=SelectionState(**overrides))


def all_tuning_entries():
    """One param per tuning table entry: (instrument id, tuning id, count, entry)."""
    return [
        pytest.param(instrument.id, tuning.id, count, entry, id=f"{tuning.id}-{count}")
        for instrument in INSTRUMENTS
        for tuning in tunings_for_instrument(instrument.id).values()
        for count, entry in tuning.strings.items()
    ]


# ============================================================================
# Selection
# ============================================================================

class TestSelection:
    """Test setters and their side effects."""

    def test_default_state(self, engine):
        """Test the engine starts on C Ionian, 4-string bass."""
        state = engine.state

        assert state.selected_key == 'C'
        assert state.selected_category == 'diatonicModes'
        assert state.selected_item == 'ionian'
        assert state.selected_instrument == 'bassGuitar'
        assert state.selected_tuning == 'standard'
        assert state.selected_string_count == 4
        assert state.show_nashville_numbers is False

    def test_defaults_from_settings(self):
        """Test initial selection follows configuration."""
        engine = MusicTheoryEngine(config=Settings(default_instrument='guitar', default_key='E'))

        assert engine.state.selected_key == 'E'
        assert engine.state.selected_tuning == 'standardGuitar'
        assert engine.state.selected_string_count == 6
        assert 'openDGuitar' in engine.tunings()

    def test_set_category_selects_first_item(self, engine):
        """Test changing category resets the item."""
        engine.set_category('triads')

        assert engine.state.selected_category == 'triads'
        assert engine.state.selected_item == 'major'
        assert engine.is_chord_category()

    def test_unknown_category_is_noop(self, engine):
        """Test unknown category leaves the selection untouched."""
        before = engine.state
        engine.set_category('nonexistent')

        assert engine.state == before

    def test_item_outside_category(self, engine):
        """Test an item not in the category resolves to nothing."""
        engine.set_item('major7')

        assert engine.current_item() is None
        assert engine.selected_note_set() == []
        assert engine.display_name() == ''
        assert engine.should_use_sharps() is True

    @pytest.mark.parametrize('instrument', INSTRUMENTS, ids=lambda i: i.id)
    def test_instrument_change_resets_tuning(self, engine, instrument):
        """Test instrument change lands on its default tuning and count."""
        engine.set_instrument(instrument.id)

        assert engine.state.selected_instrument == instrument.id
        if instrument.id == 'piano':
            assert engine.state.selected_tuning == 'standard61'
            assert engine.state.selected_string_count == 61
        else:
            assert engine.state.selected_tuning == instrument.default_tuning
            assert engine.state.selected_string_count == instrument.supported_string_counts[0]
        assert set(engine.tunings()) == set(tunings_for_instrument(instrument.id))

    def test_instrument_change_after_edits(self, engine):
        """Test instrument change overrides earlier tuning edits."""
        engine.set_instrument('guitar')
        engine.set_tuning('openGGuitar')
        engine.set_string_count(8)
        engine.set_instrument('bassGuitar')

        assert engine.state.selected_tuning == 'standard'
        assert engine.state.selected_string_count == 4

    def test_unknown_instrument_is_noop(self, engine):
        """Test unknown instrument keeps state and tunings."""
        before = engine.state
        engine.set_instrument('banjo')

        assert engine.state == before
        assert 'dropD' in engine.tunings()

    def test_reselecting_instrument_is_silent(self, engine):
        """Test re-selecting the current instrument neither notifies nor logs."""
        listener = MagicMock()
        engine.subscribe(listener)

        with patch('theorylab.music.engine.logger') as mock_logger:
            engine.set_instrument('bassGuitar')
            mock_logger.info.assert_not_called()

            engine.set_instrument('guitar')
            mock_logger.info.assert_called_once()
            assert mock_logger.info.call_args[0][0] == 'instrument_changed'

        listener.assert_called_once()

    def test_tunings_cannot_alter_shared_tables(self, engine):
        """Test edits through the visible tuning table do not reach other engines."""
        visible = engine.tunings()

        with pytest.raises(TypeError):
            visible['standard'].strings[4] = visible['standard'].strings[5]

        del visible['dropD']

        other = MusicTheoryEngine()
        assert 'dropD' in other.tunings()
        assert other.generate_fretboard()[0][0].note_name == 'G'

    def test_toggle_nashville(self, engine):
        """Test toggling the degree labels."""
        engine.toggle_nashville_numbers()
        assert engine.state.show_nashville_numbers is True
        engine.toggle_nashville_numbers()
        assert engine.state.show_nashville_numbers is False

    def test_listeners_notified_on_change(self, engine):
        """Test listeners receive each new state once."""
        listener = MagicMock()
        engine.subscribe(listener)

        engine.set_key('D')
        engine.set_key('D')

        listener.assert_called_once()
        assert listener.call_args[0][0].selected_key == 'D'

        engine.unsubscribe(listener)
        engine.set_key('E')
        listener.assert_called_once()

    def test_failing_listener_does_not_break_setter(self, engine):
        """Test listener errors are contained."""
        engine.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        healthy = MagicMock()
        engine.subscribe(healthy)

        engine.set_key('G')

        assert engine.state.selected_key == 'G'
        healthy.assert_called_once()


# ============================================================================
# Note sets and notation
# ============================================================================

class TestNoteSets:
    """Test selected note set computation."""

    def test_every_definition_in_c(self):
        """Test key C yields each interval mod 12 in order, duplicates kept."""
        for category in CATEGORIES:
            for item in category.items:
                engine = make_engine(selected_category=category.id, selected_item=item.id)
                assert engine.selected_note_set() == [i % 12 for i in item.intervals]

    def test_a_dorian(self):
        """Test A Dorian."""
        engine = MusicTheoryEngine()
        engine.set_key('A')
        engine.set_category('diatonicModes')
        engine.set_item('dorian')

        assert engine.selected_note_set() == [9, 11, 0, 2, 4, 6, 7]
        # Dorian prefers flats, so the sixth is spelled Gb
        assert engine.formula_as_note_names() == 'A - B - C - D - E - Gb - G'

    def test_compound_intervals_reduced(self):
        """Test 9th chords fold the 9th into the octave."""
        engine = make_engine(selected_key='G', selected_category='extended', selected_item='dominant9')

        assert engine.selected_note_set() == [7, 11, 2, 5, 9]

    @pytest.mark.parametrize('item,expected', [
        ('allNotesSharp', list(range(12))),
        ('allNotesFlat', list(range(12))),
        ('naturalNotes', [0, 2, 4, 5, 7, 9, 11]),
        ('sharps', [1, 3, 6, 8, 10]),
        ('flats', [1, 3, 6, 8, 10]),
    ])
    def test_pseudo_scales_ignore_key(self, item, expected):
        """Test fretboard-notes selections ignore the key."""
        engine = make_engine(selected_key='F#', selected_category='fretboardNotes', selected_item=item)

        assert engine.selected_note_set() == expected
        assert engine.is_key_disabled()

    def test_unknown_key(self):
        """Test an unresolvable key yields no notes and no roots."""
        engine = make_engine(selected_key='H')

        assert engine.selected_note_set() == []
        assert not any(cell.is_root for row in engine.generate_fretboard() for cell in row)


class TestNotation:
    """Test sharp/flat resolution order."""

    @pytest.mark.parametrize('key,category,item,expected', [
        # Pseudo-scale selection overrides the key
        ('F', 'fretboardNotes', 'allNotesSharp', True),
        ('F#', 'fretboardNotes', 'flats', False),
        ('Bb', 'fretboardNotes', 'sharps', True),
        ('C', 'fretboardNotes', 'allNotesFlat', False),
        # Flat keys prefer flats
        ('F', 'diatonicModes', 'ionian', False),
        ('Bb', 'diatonicModes', 'lydian', False),
        ('F', 'fretboardNotes', 'naturalNotes', False),
        # Accidental in the key name is mirrored
        ('F#', 'diatonicModes', 'aeolian', True),
        ('C#/Db', 'diatonicModes', 'dorian', True),
        ('G#', 'triads', 'minor', True),
        # Definition preference, chords default to sharps
        ('C', 'diatonicModes', 'aeolian', False),
        ('C', 'diatonicModes', 'ionian', True),
        ('D', 'diatonicModes', 'dorian', False),
        ('C', 'seventh', 'minor7', True),
    ])
    def test_should_use_sharps(self, key, category, item, expected):
        """Test the four-step notation policy."""
        engine = make_engine(selected_key=key, selected_category=category, selected_item=item)
        assert engine.should_use_sharps() is expected

    @pytest.mark.parametrize('item,table', [('allNotesSharp', CHROMATIC_SHARPS), ('allNotesFlat', CHROMATIC_FLATS)])
    def test_name_round_trip(self, item, table):
        """Test note index and note name agree under each notation."""
        engine = make_engine(selected_category='fretboardNotes', selected_item=item)
        for name in table:
            assert engine.note_name(engine.compute_note_index(name)) == name

    def test_grid_spelling_follows_notation(self):
        """Test fretboard cells use the resolved spelling."""
        engine = make_engine(selected_key='F')
        names = {cell.note_name for row in engine.generate_fretboard() for cell in row}

        assert 'Bb' in names
        assert 'A#' not in names


class TestIndexKeys:
    """Test keys selected by pitch class index instead of name."""

    def test_note_set(self, engine):
        """Test A Dorian selected by index."""
        engine.set_key(9)
        engine.set_item('dorian')

        assert engine.selected_note_set() == [9, 11, 0, 2, 4, 6, 7]
        assert engine.formula_as_note_names() == 'A - B - C - D - E - Gb - G'

    @pytest.mark.parametrize('item,expected', [
        ('ionian', True),
        ('aeolian', False),
        ('dorian', False),
    ])
    def test_notation_follows_definition(self, engine, item, expected):
        """Test an index key has no spelling to mirror, so the definition decides."""
        engine.set_key(6)
        engine.set_item(item)

        assert engine.should_use_sharps() is expected

    def test_flat_key_index_not_forced_to_flats(self):
        """Test index 5 (F) follows the definition rather than the flat-key set."""
        engine = make_engine(selected_key=5)
        assert engine.should_use_sharps() is True
        assert engine.formula_as_note_names() == 'F - G - A - A# - C - D - E'

    def test_is_root(self):
        """Test root flags land on the indexed pitch class."""
        engine = make_engine(selected_key=4)
        grid = engine.generate_fretboard()

        for row in grid:
            for cell in row:
                assert cell.is_root == (cell.note_value == 4)
        assert grid[3][0].is_root is True
        assert grid[3][0].nashville_number == '1'

    def test_display_name_spells_key(self):
        """Test chord names spell an index key under the current notation."""
        engine = make_engine(selected_key=7, selected_category='seventh', selected_item='major7')
        assert engine.display_name() == 'Gmaj7'

        engine.set_key(10)
        engine.set_item('dominant7')
        assert engine.key_name() == 'A#'
        assert engine.display_name() == 'A#7'

    def test_out_of_range_index(self, engine):
        """Test indices outside 0..11 resolve to no key."""
        engine.set_key(12)

        assert engine.selected_note_set() == []
        assert engine.key_name() == ''
        assert not any(cell.is_root for row in engine.generate_fretboard() for cell in row)


# ============================================================================
# Layout
# ============================================================================

class TestFretboard:
    """Test fretboard generation."""

    @pytest.mark.parametrize('instrument_id,tuning_id,count,entry', all_tuning_entries())
    def test_grid_shape_and_open_strings(self, instrument_id, tuning_id, count, entry):
        """Test every tuning entry yields count rows of max_fret + 1 cells."""
        engine = make_engine(
            selected_instrument=instrument_id,
            selected_tuning=tuning_id,
            selected_string_count=count
        )
        grid = engine.generate_fretboard()

        assert len(grid) == count
        for string_index, row in enumerate(grid):
            assert len(row) == engine.max_fret + 1
            assert [cell.fret for cell in row] == list(range(engine.max_fret + 1))
            assert row[0].note_value == entry.notes[string_index]
            assert row[0].octave == entry.octaves[string_index]

    def test_max_fret_is_fifteen(self, engine):
        """Test default fret range."""
        assert engine.max_fret == 15
        assert len(engine.generate_fretboard()[0]) == 16

    def test_octave_rolls_over_at_c(self, engine):
        """Test low E string on bass reaches C3 at the 8th fret."""
        low_e = engine.generate_fretboard()[3]

        assert (low_e[0].note_name, low_e[0].octave) == ('E', 2)
        assert (low_e[7].note_name, low_e[7].octave) == ('B', 2)
        assert (low_e[8].note_name, low_e[8].octave) == ('C', 3)
        assert low_e[12].octave == 3

    @pytest.mark.parametrize('key', CHROMATIC_SHARPS)
    def test_is_root_matches_key(self, key):
        """Test root flags exactly where the pitch class is the key."""
        engine = make_engine(selected_key=key, selected_instrument='guitar',
                             selected_tuning='standardGuitar', selected_string_count=6)
        key_index = engine.compute_note_index(key)

        for row in engine.generate_fretboard():
            for cell in row:
                assert cell.is_root == (cell.note_value == key_index)

    def test_is_in_mode(self, engine):
        """Test membership flags follow the selected set."""
        mode = set(engine.selected_note_set())
        for row in engine.generate_fretboard():
            for cell in row:
                assert cell.is_in_mode == (cell.note_value in mode)

    def test_nashville_labels(self):
        """Test cells carry degrees relative to the key."""
        engine = make_engine(selected_key='A')
        open_strings = [row[0] for row in engine.generate_fretboard()]

        # G D A E against A
        assert [cell.nashville_number for cell in open_strings] == ['b7', '4', '1', '5']

    def test_missing_string_count_returns_empty(self):
        """Test a count the tuning lacks yields an empty grid."""
        engine = make_engine(selected_string_count=7)
        assert engine.generate_fretboard() == []

    def test_unknown_tuning_returns_empty(self):
        """Test a tuning of another instrument yields an empty grid."""
        engine = make_engine(selected_tuning='standardGuitar')
        assert engine.generate_fretboard() == []

    def test_grids_are_fresh(self, engine):
        """Test each query builds a new grid."""
        first = engine.generate_fretboard()
        engine.set_key('E')
        second = engine.generate_fretboard()

        assert first is not second
        assert first[0][0].is_root is False
        assert second[3][0].is_root is True


class TestKeyboard:
    """Test keyboard generation."""

    def test_piano_defaults_to_61_keys(self, engine):
        """Test selecting piano gives a 61-key row from C2 to C7."""
        engine.set_instrument('piano')
        keys = engine.generate_keyboard()

        assert len(keys) == 61
        assert [k.fret for k in keys] == list(range(61))
        assert (keys[0].note_name, keys[0].octave) == ('C', 2)
        assert (keys[-1].note_name, keys[-1].octave) == ('C', 7)

    def test_full_keyboard(self, engine):
        """Test the 88-key layout runs A0 to C8."""
        engine.set_instrument('piano')
        engine.set_tuning('standard88')
        engine.set_string_count(88)
        keys = engine.generate_keyboard()

        assert len(keys) == 88
        assert keys[0].scientific_name == 'A0'
        assert keys[-1].scientific_name == 'C8'
        assert keys[48].midi_note == 69
        assert keys[48].frequency == pytest.approx(440.0)

    def test_root_and_black_keys(self):
        """Test root flags and key colours."""
        engine = make_engine(selected_key='D', selected_instrument='piano',
                             selected_tuning='standard25', selected_string_count=25)
        keys = engine.generate_keyboard()

        assert [k.fret for k in keys if k.is_root] == [2, 14]
        assert [k.is_black_key for k in keys[:5]] == [False, True, False, True, False]

    def test_mismatched_key_count_returns_empty(self):
        """Test a key count the tuning lacks yields no keys."""
        engine = make_engine(selected_instrument='piano', selected_tuning='standard61',
                             selected_string_count=88)
        assert engine.generate_keyboard() == []


class TestFretNote:
    """Test derived cell properties."""

    def test_derived_properties(self):
        """Test MIDI, frequency and naming helpers."""
        note = FretNote(fret=5, note_value=9, note_name='A', octave=4,
                        nashville_number='1', is_root=True, is_in_mode=True)

        assert note.midi_note == 69
        assert note.frequency == pytest.approx(440.0)
        assert note.scientific_name == 'A4'
        assert note.is_black_key is False

    def test_flat_is_black_key(self):
        """Test flat spellings count as black keys."""
        note = FretNote(fret=0, note_value=10, note_name='Bb', octave=3,
                        nashville_number='b7', is_root=False, is_in_mode=False)
        assert note.is_black_key is True


# ============================================================================
# Formatting
# ============================================================================

class TestFormatting:
    """Test formula and label formatting."""

    def test_note_formula(self, engine):
        """Test C major spelled out."""
        assert engine.formula_as_note_names() == 'C - D - E - F - G - A - B'

    def test_note_formula_with_degrees(self, engine):
        """Test inline degrees when Nashville numbers are on."""
        engine.set_category('triads')
        engine.set_item('minor')
        engine.set_key('E')
        engine.toggle_nashville_numbers()

        assert engine.formula_as_note_names() == 'E (1) - G (b3) - B (5)'

    def test_degree_formula(self):
        """Test degree labels, compound intervals folded."""
        engine = make_engine(selected_category='extended', selected_item='dominant9')
        assert engine.formula_as_degree_numbers() == '1 - 3 - 5 - b7 - 2'

    def test_flat_key_formula(self):
        """Test flat keys spell with flats."""
        engine = make_engine(selected_key='Bb', selected_category='seventh', selected_item='dominant7')
        assert engine.formula_as_note_names() == 'Bb - D - F - Ab'

    @pytest.mark.parametrize('item,expected', [
        ('allNotesSharp', 'All 12 notes of the chromatic scale'),
        ('naturalNotes', 'C - D - E - F - G - A - B'),
        ('sharps', 'C# - D# - F# - G# - A#'),
        ('flats', 'Db - Eb - Gb - Ab - Bb'),
    ])
    def test_pseudo_scale_formulas(self, item, expected):
        """Test fixed formulas for fretboard-notes selections."""
        engine = make_engine(selected_key='E', selected_category='fretboardNotes', selected_item=item)

        assert engine.formula_as_note_names() == expected
        assert engine.formula_as_degree_numbers() == ''

    def test_display_name_chord(self):
        """Test chords render as key plus symbol."""
        engine = make_engine(selected_key='G', selected_category='seventh', selected_item='major7')
        assert engine.display_name() == 'Gmaj7'

        engine.set_category('triads')
        assert engine.display_name() == 'G'

    def test_display_name_scale(self):
        """Test scales render as their own name."""
        engine = make_engine(selected_key='G', selected_item='dorian')
        assert engine.display_name() == 'Dorian'

    def test_get_state(self, engine):
        """Test state summary includes derived labels."""
        summary = engine.get_state()

        assert summary['selected_key'] == 'C'
        assert summary['display_name'] == 'Ionian (Major)'
        assert summary['degrees'] == '1 - 2 - 3 - 4 - 5 - 6 - 7'
        assert summary['use_sharps'] is True
        assert summary['key_disabled'] is False
