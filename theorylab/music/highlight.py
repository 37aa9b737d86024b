"""
Scale and chord highlighting for the tab viewer.

Flattens the catalog into picker options and builds the highlight
configuration handed to the tablature renderer.
"""

from dataclasses import dataclass
from typing import Dict, List, Tuple

from theorylab.core.exceptions import UnknownItemError
from theorylab.core.logging import get_logger
from theorylab.music.catalog import CATEGORIES, DefinitionKind, find_item
from theorylab.music.notes import CHROMATIC_COMBINED

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScaleOption:
    """A catalog item as offered in the highlighter picker."""
    id: str
    name: str
    intervals: Tuple[int, ...]
    category_name: str


@dataclass(frozen=True)
class HighlightConfig:
    """Which notes the tab viewer should highlight."""
    enabled: bool
    root_note: int
    intervals: Tuple[int, ...]
    name: str
    kind: DefinitionKind = DefinitionKind.SCALE

    def highlighted_notes(self) -> List[int]:
        """Pitch classes to highlight, one per interval."""
        return [(self.root_note + interval) % 12 for interval in self.intervals]


DEFAULT_HIGHLIGHT = HighlightConfig(enabled=False, root_note=0, intervals=(), name='')


def scale_options() -> List[ScaleOption]:
    """Every scale and chord in catalog order."""
    return [
        ScaleOption(item.id, item.name, item.intervals, category.name)
        for category in CATEGORIES
        for item in category.items
    ]


def grouped_scale_options() -> Dict[str, List[ScaleOption]]:
    """Options keyed by category name, preserving catalog order."""
    groups: Dict[str, List[ScaleOption]] = {}
    for option in scale_options():
        groups.setdefault(option.category_name, []).append(option)
    return groups


def build_highlight(
    enabled: bool,
    root_note: int,
    item_id: str,
    kind: DefinitionKind = DefinitionKind.SCALE
) -> HighlightConfig:
    """
    Build a highlight configuration.

    Args:
        enabled: Whether highlighting was switched on
        root_note: Root pitch class 0-11
        item_id: Scale or chord id
        kind: Scale or chord, as chosen in the picker

    Returns:
        Configuration; disabled with no intervals if the item is unknown
    """
    root_note %= 12
    try:
        _, item = find_item(item_id)
    except UnknownItemError as e:
        logger.warning("unknown_highlight_item", item_id=e.item_id)
        return HighlightConfig(enabled=False, root_note=root_note, intervals=(), name='', kind=kind)

    return HighlightConfig(
        enabled=enabled,
        root_note=root_note,
        intervals=item.intervals,
        name=f"{CHROMATIC_COMBINED[root_note]} {item.name}",
        kind=kind,
    )
