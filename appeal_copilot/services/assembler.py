"""Flat-text rendering of a finished appeal package for download."""

from dataclasses import dataclass

from appeal_copilot.models import AppealPackage

ARTIFACT_FILENAME = "appeal-letter.txt"
ARTIFACT_MEDIA_TYPE = "text/plain"

HEADER = "PRIOR AUTHORIZATION APPEAL LETTER"
BULLET = "•"


@dataclass(frozen=True)
class Artifact:
    """A downloadable file handed to the export collaborator."""

    filename: str
    media_type: str
    data: bytes


def _numbered(items: list[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _bulleted(items: list[str]) -> str:
    return "\n".join(f"{BULLET} {item}" for item in items)


def assemble_appeal(package: AppealPackage) -> str:
    """Render an appeal package as a plain-text document.

    Args:
        package: A validated appeal package.

    Returns:
        The letter followed by numbered submission instructions, the
        documents checklist, the deadline reminder and the tips.
    """
    sections = [
        HEADER,
        package.appeal_letter,
        "---",
        f"SUBMISSION INSTRUCTIONS:\n{_numbered(package.submission_instructions)}",
        f"REQUIRED DOCUMENTS:\n{_bulleted(package.documents_to_include)}",
        f"IMPORTANT: {package.deadline_reminder}".rstrip(),
        f"ADDITIONAL TIPS:\n{_bulleted(package.additional_tips)}",
    ]
    return "\n\n".join(section.rstrip() for section in sections) + "\n"


def export_artifact(package: AppealPackage) -> Artifact:
    """Wrap the assembled text as a UTF-8 ``appeal-letter.txt`` blob."""
    return Artifact(
        filename=ARTIFACT_FILENAME,
        media_type=ARTIFACT_MEDIA_TYPE,
        data=assemble_appeal(package).encode("utf-8"),
    )
