"""
Error taxonomy for declaration generation.

Every error here is fatal for the generation run that raised it.
Nothing is retried.
"""


class TypeGenError(Exception):
    """Base class for all generator failures."""
    pass


class AcquisitionError(TypeGenError):
    """Catalog source could not be prepared (scratch dir, download, extraction, missing files)."""
    pass


class VersionError(TypeGenError):
    """Requested catalog version is non-numeric or below the supported floor."""
    pass


class CatalogParseError(TypeGenError):
    """A descriptor or the constants file is not valid JSON or lacks required fields."""
    pass


class OutputError(TypeGenError):
    """The output target could not be inspected or written."""
    pass


__all__ = [
    "TypeGenError",
    "AcquisitionError",
    "VersionError",
    "CatalogParseError",
    "OutputError",
]
