class TasteEngineError(ValueError):
    """Base exception for all taste engine domain errors."""

    pass


class MalformedRecordError(TasteEngineError):
    """Raised when a raw library record cannot be normalized (e.g. missing media_type)."""

    pass


class DataIntegrityError(TasteEngineError):
    """Raised when a record's media_type tagging conflicts with its joined metadata."""

    pass
