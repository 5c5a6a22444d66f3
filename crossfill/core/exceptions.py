"""Custom exception hierarchy for puzzle generation."""


class CrosswordError(Exception):
    """Base exception for generator failures."""


class DictionaryLoadError(CrosswordError):
    """Raised when a word list or playability file cannot be parsed."""


class PlacementError(CrosswordError):
    """Raised when a write would leave the working grid.

    Placements are validated before they are written, so this signals a
    programming defect rather than a recoverable condition.
    """


class GenerationError(CrosswordError):
    """Raised when a worker request terminates with an error message."""
