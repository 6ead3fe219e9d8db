"""
Exception types raised by the export pipeline.

Configuration errors are detected before any output is produced and are
recoverable by the caller. I/O errors raised by a delivery sink are never
wrapped; they propagate unchanged.
"""


class FormExportError(Exception):
    """Base class for all export errors."""


class ExportConfigurationError(FormExportError, ValueError):
    """The export request cannot be started as configured."""


class InvalidSeparatorError(ExportConfigurationError):
    """The field separator is not a single usable character."""

    def __init__(self, separator):
        self.separator = separator
        super().__init__(
            f"Separator must be exactly one character other than a quote "
            f"or line break, got {separator!r}"
        )


class MissingFormError(ExportConfigurationError):
    """No form was selected for export."""


class FormNotFoundError(ExportConfigurationError):
    """The selected form does not exist in the form store."""

    def __init__(self, form_id):
        self.form_id = form_id
        super().__init__(f"Form not found: {form_id}")


class FormStoreError(FormExportError):
    """The form store's backing data could not be read."""
