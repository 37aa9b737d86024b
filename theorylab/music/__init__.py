"""
Music-theory engine.

Includes:
- Pitch-class tables and note naming
- Scale and chord catalog
- Instrument and tuning tables
- Fretboard/keyboard layout engine
- Tab viewer scale highlighting
"""

from theorylab.music.catalog import CATEGORIES, Category, Definition, DefinitionKind, get_category
from theorylab.music.engine import FretNote, MusicTheoryEngine
from theorylab.music.highlight import HighlightConfig, build_highlight, scale_options
from theorylab.music.instruments import INSTRUMENTS, Instrument, Tuning, TuningStrings
from theorylab.music.notes import NOT_FOUND, compute_note_index, get_note_name
from theorylab.music.state import SelectionState

__all__ = [
    'CATEGORIES',
    'Category',
    'Definition',
    'DefinitionKind',
    'get_category',
    'FretNote',
    'MusicTheoryEngine',
    'HighlightConfig',
    'build_highlight',
    'scale_options',
    'INSTRUMENTS',
    'Instrument',
    'Tuning',
    'TuningStrings',
    'NOT_FOUND',
    'compute_note_index',
    'get_note_name',
    'SelectionState',
]
