"""Document encoding into the completion service's base64 source blocks."""

import base64
import logging

import fitz  # PyMuPDF

from appeal_copilot.errors import IoFailure
from appeal_copilot.models import Document, EncodedPayload

logger = logging.getLogger(__name__)


def _check_pdf_readable(document: Document) -> int:
    """Open the PDF bytes and return the page count.

    Raises:
        IoFailure: If the PDF is corrupt or has zero pages.
    """
    try:
        doc = fitz.open(stream=document.content, filetype="pdf")
    except Exception as exc:
        logger.error("Failed to open PDF: %s — %s", document.filename, exc)
        raise IoFailure(f"Corrupt or unreadable PDF: {document.filename}") from exc

    try:
        page_count = doc.page_count
    finally:
        doc.close()

    if page_count == 0:
        raise IoFailure(f"PDF has zero pages: {document.filename}")
    return page_count


def encode_document(document: Document) -> EncodedPayload:
    """Convert an accepted document into a transport-ready payload.

    PDFs are sent as ``document`` blocks, JPEG and PNG files as ``image``
    blocks; ``image/jpg`` is normalized to ``image/jpeg``.

    Args:
        document: A document accepted by the intake validator.

    Returns:
        The classification, normalized media type and base64 body.

    Raises:
        IoFailure: If the bytes are empty or the PDF cannot be opened.
    """
    if not document.content:
        raise IoFailure(f"Failed to read file: {document.filename or 'upload'} is empty")

    if document.content_classification == "document":
        pages = _check_pdf_readable(document)
        logger.info("PDF %s opened with %d page(s)", document.filename, pages)

    payload = EncodedPayload(
        content_classification=document.content_classification,
        normalized_media_type=document.normalized_media_type,
        base64_body=base64.b64encode(document.content).decode("ascii"),
    )
    logger.debug(
        "Encoded %s as %s/%s (%d base64 chars)",
        document.filename,
        payload.content_classification,
        payload.normalized_media_type,
        len(payload.base64_body),
    )
    return payload
