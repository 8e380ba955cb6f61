"""Appeal node — drafts the appeal package from extracted denial facts."""

import json
import logging
from typing import Any

from appeal_copilot.config import Settings
from appeal_copilot.graph.nodes.llm_client import CompletionClient
from appeal_copilot.models import AppealPackage, ExtractedRecord
from appeal_copilot.services.response_parser import parse_appeal_package

logger = logging.getLogger(__name__)

GENERATION_PROMPT_TEMPLATE = """Based on this insurance denial information, generate a professional appeal letter and submission instructions.

DENIAL DETAILS:
{denial_details}

Respond ONLY with valid JSON in this exact structure:
{{
  "appealLetter": "full professionally written appeal letter text",
  "submissionInstructions": ["step 1", "step 2", "step 3"],
  "documentsToInclude": ["document 1", "document 2"],
  "deadlineReminder": "friendly reminder about deadline",
  "additionalTips": ["tip 1", "tip 2"]
}}

The appeal letter should be formal, cite medical necessity if relevant, and request reconsideration."""


def build_generation_prompt(record: ExtractedRecord) -> str:
    """Embed the full record, keyed by wire names, into the instruction."""
    details = json.dumps(record.to_wire(), indent=2, ensure_ascii=False)
    return GENERATION_PROMPT_TEMPLATE.format(denial_details=details)


def build_generation_request(record: ExtractedRecord, settings: Settings) -> dict[str, Any]:
    """Build the request body asking the service for an appeal package.

    Args:
        record: The extracted denial facts.
        settings: Supplies the model identifier and output token budget.

    Returns:
        A JSON-serialisable body with a single plain-text user message.
    """
    return {
        "model": settings.model,
        "max_tokens": settings.generation_max_tokens,
        "messages": [
            {"role": "user", "content": build_generation_prompt(record)},
        ],
    }


async def generate_appeal(
    client: CompletionClient,
    record: ExtractedRecord,
    settings: Settings,
) -> AppealPackage:
    """Ask the completion service to draft an appeal package.

    Raises:
        NetworkFailure: If the service cannot be reached.
        HttpStatusError: On a non-success response status.
        MalformedResponseJSON: If the output is not a valid appeal package.
    """
    body = build_generation_request(record, settings)
    logger.info("Appeal generation request — reference=%r", record.reference_number)
    raw = await client.complete(body)
    package = parse_appeal_package(raw)
    logger.info(
        "Appeal generated — letter_chars=%d steps=%d documents=%d",
        len(package.appeal_letter),
        len(package.submission_instructions),
        len(package.documents_to_include),
    )
    return package
