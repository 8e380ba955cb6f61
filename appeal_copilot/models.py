"""Data model for denial documents, extracted facts and appeal packages."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Declared content type -> (content classification, normalized media type)
MEDIA_TYPE_MAP: dict[str, tuple[str, str]] = {
    "application/pdf": ("document", "application/pdf"),
    "image/jpeg": ("image", "image/jpeg"),
    "image/jpg": ("image", "image/jpeg"),
    "image/png": ("image", "image/png"),
}


@dataclass(frozen=True)
class UploadCandidate:
    """A file handed over by the intake collaborator, not yet validated."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class Document:
    """An accepted denial document.

    Attributes:
        content: Raw file bytes.
        content_type: Declared content type, one of ``MEDIA_TYPE_MAP``.
        filename: Original file name, used only for display and logging.
    """

    content: bytes
    content_type: str
    filename: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def content_classification(self) -> str:
        return MEDIA_TYPE_MAP[self.content_type][0]

    @property
    def normalized_media_type(self) -> str:
        return MEDIA_TYPE_MAP[self.content_type][1]

    def __repr__(self) -> str:
        return (
            f"Document(filename={self.filename!r}, "
            f"content_type={self.content_type!r}, size={self.size})"
        )


@dataclass(frozen=True)
class EncodedPayload:
    """Transport-ready form of a ``Document``."""

    content_classification: str
    normalized_media_type: str
    base64_body: str


class ExtractedRecord(BaseModel):
    """Denial facts extracted from the document.

    Every field is optional on the wire; missing or ``null`` values are
    normalized to an empty string or empty list.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    patient_name: str = Field("", alias="patientName")
    patient_id: str = Field("", alias="patientId")
    insurance_company: str = Field("", alias="insuranceCompany")
    denial_reason: str = Field("", alias="denialReason")
    denied_service: str = Field("", alias="deniedService")
    denial_date: str = Field("", alias="denialDate")
    appeal_deadline: str = Field("", alias="appealDeadline")
    required_documents: list[str] = Field(default_factory=list, alias="requiredDocuments")
    reference_number: str = Field("", alias="referenceNumber")
    additional_notes: str = Field("", alias="additionalNotes")

    @field_validator(
        "patient_name",
        "patient_id",
        "insurance_company",
        "denial_reason",
        "denied_service",
        "denial_date",
        "appeal_deadline",
        "reference_number",
        "additional_notes",
        mode="before",
    )
    @classmethod
    def _null_to_empty_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("required_documents", mode="before")
    @classmethod
    def _null_to_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_wire(self) -> dict[str, Any]:
        """Return the record keyed by its camelCase wire names."""
        return self.model_dump(by_alias=True)


class AppealPackage(BaseModel):
    """Generated appeal letter with its submission checklist."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    appeal_letter: str = Field(..., alias="appealLetter", min_length=1)
    submission_instructions: list[str] = Field(
        default_factory=list, alias="submissionInstructions"
    )
    documents_to_include: list[str] = Field(default_factory=list, alias="documentsToInclude")
    deadline_reminder: str = Field("", alias="deadlineReminder")
    additional_tips: list[str] = Field(default_factory=list, alias="additionalTips")

    @field_validator("deadline_reminder", mode="before")
    @classmethod
    def _null_to_empty_string(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator(
        "submission_instructions",
        "documents_to_include",
        "additional_tips",
        mode="before",
    )
    @classmethod
    def _null_to_empty_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_wire(self) -> dict[str, Any]:
        """Return the package keyed by its camelCase wire names."""
        return self.model_dump(by_alias=True)
