"""
Aurora exception hierarchy
"""


class AuroraError(Exception):
    """Base class for errors the tools report to the user."""
    pass


class ModelLoadError(AuroraError):
    """
    Raised when an architecture model cannot be found or parsed.

    The message names the model and every location that was searched,
    followed by the underlying error.
    """
    pass


class ExportError(AuroraError):
    """Raised when an occurrence property export cannot be written."""
    pass


class RequirementImportError(AuroraError):
    """Raised when the requirements workbook or its sheet cannot be read."""
    pass


class DisplayUnavailableError(AuroraError):
    """Raised when the selection dialog cannot open a window."""
    pass
