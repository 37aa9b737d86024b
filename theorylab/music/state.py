"""
Selection state for the music-theory engine.
"""

from dataclasses import asdict, dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class SelectionState:
    """
    Current user selection.

    Immutable; the engine swaps in a new instance on every change.
    """
    # Key name ('F#', 'C#/Db') or pitch class index
    selected_key: Union[int, str] = 'C'
    selected_category: str = 'diatonicModes'
    selected_item: str = 'ionian'
    selected_instrument: str = 'bassGuitar'
    selected_tuning: str = 'standard'
    selected_string_count: int = 4
    show_nashville_numbers: bool = False

    def to_dict(self) -> Dict:
        """Get state as dictionary."""
        return asdict(self)
