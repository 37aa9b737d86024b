"""
Custom exceptions for the theorylab music-theory engine.
"""


class TheoryLabError(Exception):
    """Base exception for all theorylab errors."""

    def __init__(self, message: str, code: str = "THEORYLAB_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class UnknownCategoryError(TheoryLabError):
    """Category id not present in the catalog."""

    def __init__(self, category_id: str) -> None:
        self.category_id = category_id
        super().__init__(f"Unknown category: {category_id}", code="UNKNOWN_CATEGORY")


class UnknownItemError(TheoryLabError):
    """Scale or chord id not present in the catalog."""

    def __init__(self, item_id: str) -> None:
        self.item_id = item_id
        super().__init__(f"Unknown scale or chord: {item_id}", code="UNKNOWN_ITEM")


class UnknownInstrumentError(TheoryLabError):
    """Instrument id not present in the instrument table."""

    def __init__(self, instrument_id: str) -> None:
        self.instrument_id = instrument_id
        super().__init__(f"Unknown instrument: {instrument_id}", code="UNKNOWN_INSTRUMENT")
