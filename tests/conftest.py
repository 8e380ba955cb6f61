"""Pytest configuration and fixtures for the appeal copilot tests."""

import json
from typing import Any, Awaitable, Callable

import fitz  # PyMuPDF
import pytest

from appeal_copilot.config import Settings
from appeal_copilot.models import UploadCandidate

JANE_DOE_RECORD: dict[str, Any] = {
    "patientName": "Jane Doe",
    "denialReason": "not medically necessary",
    "requiredDocuments": ["MRI report"],
}

APPEAL_PACKAGE: dict[str, Any] = {
    "appealLetter": "Dear Appeals Department,\n\nPlease reconsider the denial.\n\nSincerely,\nJane Doe",
    "submissionInstructions": ["Sign the letter", "Attach the MRI report", "Mail to the insurer"],
    "documentsToInclude": ["MRI report", "Physician letter"],
    "deadlineReminder": "Submit before June 30, 2024.",
    "additionalTips": ["Keep copies of everything"],
}


class FakeCompletionClient:
    """Stands in for ``CompletionClient`` with canned responses.

    Each entry in ``responses`` is either raw model text or an exception
    to raise. ``on_call`` runs before the response is returned, which lets
    tests act on the controller while a request is outstanding.
    """

    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.bodies: list[dict[str, Any]] = []
        self.settings = Settings(api_key="test-key")
        self.on_call: Callable[[], Awaitable[None]] | None = None

    async def complete(self, body: dict[str, Any]) -> str:
        self.bodies.append(body)
        if self.on_call is not None:
            await self.on_call()
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def build_pdf() -> Callable[[list[str]], bytes]:
    """Return a helper that creates an in-memory PDF with the given page texts."""

    def _build(page_texts: list[str]) -> bytes:
        doc = fitz.open()
        for text in page_texts:
            page = doc.new_page()
            page.insert_text((72, 72), text, fontsize=11)
        raw = doc.tobytes()
        doc.close()
        return raw

    return _build


@pytest.fixture
def pdf_candidate(build_pdf) -> UploadCandidate:
    return UploadCandidate(
        filename="denial.pdf",
        content_type="application/pdf",
        content=build_pdf(["Your request for MRI lumbar spine has been denied."]),
    )


@pytest.fixture
def png_candidate() -> UploadCandidate:
    return UploadCandidate(
        filename="denial.png",
        content_type="image/png",
        content=b"\x89PNG\r\n\x1a\n fake image bytes",
    )


@pytest.fixture
def record_text() -> str:
    return json.dumps(JANE_DOE_RECORD)


@pytest.fixture
def appeal_text() -> str:
    return "```json\n" + json.dumps(APPEAL_PACKAGE) + "\n```"


@pytest.fixture
def fake_client_factory() -> Callable[[list[Any]], FakeCompletionClient]:
    return FakeCompletionClient


@pytest.fixture
def record_data() -> dict[str, Any]:
    return json.loads(json.dumps(JANE_DOE_RECORD))


@pytest.fixture
def appeal_data() -> dict[str, Any]:
    return json.loads(json.dumps(APPEAL_PACKAGE))
