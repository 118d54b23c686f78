"""
errors.py — Export error taxonomy.

Every error aborts the whole export run. Each carries a short
`user_message` that the assembler hands to the notifier unchanged.
"""


class ExportError(Exception):
    """Base class for all export failures."""

    user_message = "Failed to export report. Please try again."

    def __init__(self, message: str = "", user_message: str | None = None):
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class CaptureError(ExportError):
    """The rasterizer could not capture a section."""

    user_message = "A report section could not be captured. Please try again."

    def __init__(self, section_id: str, reason: str = ""):
        self.section_id = section_id
        detail = f"Capture failed for section '{section_id}'"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


class InvalidBitmapError(ExportError):
    """A captured bitmap has no usable width."""

    user_message = "A report section rendered empty and could not be placed."


class EmptyContentError(ExportError):
    """There are no sections to export."""

    user_message = "There is nothing to export yet."


class SerializationError(ExportError):
    """The document writer failed to produce bytes."""

    user_message = "The report file could not be generated. Please try again."


class ExportInProgressError(ExportError):
    """Another export is already running on the same assembler."""

    user_message = "An export is already in progress."
