"""Exceptions shared by the import pipeline and the persistence layer."""


class ActivityImportError(Exception):
    """Base class for failures while turning a file into runs."""


class UnsupportedFormatError(ActivityImportError):
    """File type we recognise as unsupported, or cannot identify at all."""


class ParseError(ActivityImportError):
    """Required data is missing or malformed; the whole file is rejected."""


class PersistenceError(Exception):
    """A create/read/update/delete call against the data store failed."""
