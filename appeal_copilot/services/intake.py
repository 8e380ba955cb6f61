"""Intake validation for uploaded denial documents."""

import logging

from appeal_copilot.errors import InvalidFileType
from appeal_copilot.models import MEDIA_TYPE_MAP, Document, UploadCandidate

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(MEDIA_TYPE_MAP)


def validate_candidate(candidate: UploadCandidate) -> Document:
    """Accept or reject an uploaded file by its declared content type.

    Args:
        candidate: The file handed over by the intake collaborator.

    Returns:
        An immutable ``Document`` wrapping the candidate's bytes.

    Raises:
        InvalidFileType: If the content type is not on the allow-list.
            Matching is exact and case-sensitive.
    """
    if candidate.content_type not in ALLOWED_CONTENT_TYPES:
        logger.warning(
            "Invalid content type: %s for file: %s",
            candidate.content_type,
            candidate.filename,
        )
        raise InvalidFileType(candidate.content_type)

    logger.info(
        "Accepted file %s (%s, %d bytes)",
        candidate.filename,
        candidate.content_type,
        candidate.size,
    )
    return Document(
        content=candidate.content,
        content_type=candidate.content_type,
        filename=candidate.filename,
    )
