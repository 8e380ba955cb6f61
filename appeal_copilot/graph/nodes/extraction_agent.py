"""Extraction node — pulls denial facts out of the uploaded document."""

import logging
from typing import Any

from appeal_copilot.config import Settings
from appeal_copilot.graph.nodes.llm_client import CompletionClient
from appeal_copilot.models import EncodedPayload, ExtractedRecord
from appeal_copilot.services.response_parser import parse_extracted_record

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are analyzing an insurance denial or prior authorization letter. Extract ALL key information and respond ONLY with a valid JSON object.

Your response must be a single JSON object with this exact structure:
{
  "patientName": "extracted patient name or empty string",
  "patientId": "member/patient ID or empty string",
  "insuranceCompany": "insurance company name or empty string",
  "denialReason": "primary reason for denial or empty string",
  "deniedService": "specific service/procedure denied or empty string",
  "denialDate": "date of denial or empty string",
  "appealDeadline": "deadline to appeal or empty string",
  "requiredDocuments": ["list of required documents"],
  "referenceNumber": "claim or reference number or empty string",
  "additionalNotes": "any other critical information or empty string"
}

Extract this information from the document. If any field cannot be determined, use an empty string or empty array."""


def build_extraction_request(payload: EncodedPayload, settings: Settings) -> dict[str, Any]:
    """Build the request body asking the service to extract denial facts.

    Args:
        payload: The encoded document.
        settings: Supplies the model identifier and output token budget.

    Returns:
        A JSON-serialisable body whose single user message holds the
        document block followed by the extraction instruction.
    """
    return {
        "model": settings.model,
        "max_tokens": settings.extraction_max_tokens,
        "messages": [
            {
                "role": "user",
                "content": [
                    {
                        "type": payload.content_classification,
                        "source": {
                            "type": "base64",
                            "media_type": payload.normalized_media_type,
                            "data": payload.base64_body,
                        },
                    },
                    {"type": "text", "text": EXTRACTION_PROMPT},
                ],
            }
        ],
    }


async def extract_denial(
    client: CompletionClient,
    payload: EncodedPayload,
    settings: Settings,
) -> ExtractedRecord:
    """Ask the completion service for the denial facts in a document.

    Raises:
        NetworkFailure: If the service cannot be reached.
        HttpStatusError: On a non-success response status.
        MalformedResponseJSON: If the output is not a valid record.
    """
    body = build_extraction_request(payload, settings)
    logger.info(
        "Extraction request — type=%s media_type=%s",
        payload.content_classification,
        payload.normalized_media_type,
    )
    raw = await client.complete(body)
    record = parse_extracted_record(raw)
    logger.info(
        "Extraction complete — insurer=%r required_documents=%d",
        record.insurance_company,
        len(record.required_documents),
    )
    return record
