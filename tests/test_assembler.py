"""Unit tests for the appeal artifact assembler."""

from appeal_copilot.models import AppealPackage
from appeal_copilot.services.assembler import (
    ARTIFACT_FILENAME,
    ARTIFACT_MEDIA_TYPE,
    assemble_appeal,
    export_artifact,
)

EXPECTED = """PRIOR AUTHORIZATION APPEAL LETTER

Dear Appeals Department,

Please reconsider the denial.

---

SUBMISSION INSTRUCTIONS:
1. Sign the letter
2. Attach the MRI report
3. Mail to the insurer

REQUIRED DOCUMENTS:
• MRI report
• Physician letter

IMPORTANT: Submit before June 30, 2024.

ADDITIONAL TIPS:
• Keep copies of everything
• Call to confirm receipt
"""


def _package(**overrides) -> AppealPackage:
    data = {
        "appealLetter": "Dear Appeals Department,\n\nPlease reconsider the denial.",
        "submissionInstructions": ["Sign the letter", "Attach the MRI report", "Mail to the insurer"],
        "documentsToInclude": ["MRI report", "Physician letter"],
        "deadlineReminder": "Submit before June 30, 2024.",
        "additionalTips": ["Keep copies of everything", "Call to confirm receipt"],
    }
    data.update(overrides)
    return AppealPackage.model_validate(data)


class TestAssembleAppeal:
    """The template renders every section in a fixed order."""

    def test_full_template(self) -> None:
        assert assemble_appeal(_package()) == EXPECTED

    def test_idempotent(self) -> None:
        package = _package()
        assert assemble_appeal(package) == assemble_appeal(package)

    def test_numbering_follows_input_order(self) -> None:
        text = assemble_appeal(_package(submissionInstructions=["c", "a", "b"]))
        assert "SUBMISSION INSTRUCTIONS:\n1. c\n2. a\n3. b\n" in text

    def test_empty_sections(self) -> None:
        text = assemble_appeal(
            _package(
                submissionInstructions=[],
                documentsToInclude=[],
                deadlineReminder="",
                additionalTips=[],
            )
        )
        assert "SUBMISSION INSTRUCTIONS:\n\nREQUIRED DOCUMENTS:\n\nIMPORTANT:\n\nADDITIONAL TIPS:\n" in text
        assert not any(line != line.rstrip() for line in text.splitlines())


class TestExportArtifact:
    """The export blob is plain text with a fixed file name."""

    def test_artifact(self) -> None:
        package = _package()
        artifact = export_artifact(package)

        assert artifact.filename == ARTIFACT_FILENAME == "appeal-letter.txt"
        assert artifact.media_type == ARTIFACT_MEDIA_TYPE == "text/plain"
        assert artifact.data == EXPECTED.encode("utf-8")
        assert export_artifact(package) == artifact
