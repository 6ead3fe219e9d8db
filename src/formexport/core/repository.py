"""
Interfaces of the collaborators the export pipeline depends on.

A FormStore supplies form definitions and submissions; a DeliverySink
receives the encoded document. Concrete implementations live in the
infrastructure package.
"""

from abc import ABC, abstractmethod

from .models import Field, FormSummary, Submission


class FormStore(ABC):
    """
    Read access to forms, their fields and their submissions.

    Implementations return fresh lists on every call; the pipeline never
    mutates what it receives.
    """

    @abstractmethod
    def list_forms(self) -> list[FormSummary]:
        """
        List the forms available for export.

        Returns:
            Form summaries in store order.
        """

    @abstractmethod
    def get_fields(self, form_id: int) -> list[Field]:
        """
        Get all fields defined by a form.

        Raises:
            FormNotFoundError: If the form does not exist.
        """

    @abstractmethod
    def get_submissions(self, form_id: int) -> list[Submission]:
        """
        Get all submissions of a form, in the order they should be exported.

        Raises:
            FormNotFoundError: If the form does not exist.
        """

    @abstractmethod
    def get_form_title(self, form_id: int) -> str:
        """
        Get the title of a form. May be empty.

        Raises:
            FormNotFoundError: If the form does not exist.
        """

    def has_form(self, form_id: int) -> bool:
        """Check whether a form exists in the store."""
        return any(summary.id == form_id for summary in self.list_forms())


class DeliverySink(ABC):
    """
    Append-only destination for an encoded document.

    Content type and file naming are decided by whoever creates the sink.
    """

    def begin(self) -> None:
        """Prepare the destination before the first write."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Append bytes to the destination.

        Raises:
            OSError: If the destination rejects the write.
        """

    def end(self) -> None:
        """Finish the document after the last write."""
