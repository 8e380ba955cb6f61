"""Workflow state controller for the document-to-appeal flow.

The controller owns the single ``WorkflowState`` value and is the only code
that changes it. The presentation layer reads ``state`` snapshots and calls
the four public operations:

* ``select_document`` — accept a new file, discarding downstream results
* ``run_extraction`` — DocumentSelected → Extracting → Extracted | Failed
* ``run_generation`` — Extracted → GeneratingAppeal → AppealReady | Failed
* ``reset`` — back to Idle from any settled state

At most one request is outstanding at a time; the guard is the current
state itself, there is no separate lock. While a request is outstanding
every operation is a no-op, so the state cannot leave the in-flight value
until the response or transport failure arrives.
"""

import logging

from appeal_copilot.config import Settings
from appeal_copilot.errors import (
    AppealWorkflowError,
    InvalidTransition,
    IoFailure,
)
from appeal_copilot.graph.nodes.appeal_agent import generate_appeal
from appeal_copilot.graph.nodes.extraction_agent import extract_denial
from appeal_copilot.graph.nodes.llm_client import CompletionClient
from appeal_copilot.graph.state import (
    IN_FLIGHT_STATES,
    AppealReady,
    DocumentSelected,
    Extracted,
    Extracting,
    Failed,
    GeneratingAppeal,
    Idle,
    WorkflowState,
    state_name,
)
from appeal_copilot.models import UploadCandidate
from appeal_copilot.services.encoder import encode_document
from appeal_copilot.services.intake import validate_candidate

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Failed to process document. Please try again."
GENERATION_FAILED_MESSAGE = "Failed to generate appeal. Please try again."

_ALLOWED_TRANSITIONS: dict[type, tuple[type, ...]] = {
    Idle: (Idle, DocumentSelected),
    DocumentSelected: (Idle, DocumentSelected, Extracting),
    Extracting: (Extracted, Failed),
    Extracted: (Idle, DocumentSelected, GeneratingAppeal),
    GeneratingAppeal: (AppealReady, Failed),
    AppealReady: (Idle, DocumentSelected),
    Failed: (Idle, DocumentSelected, Extracting, GeneratingAppeal),
}


class AppealWorkflowController:
    """Sequences intake, extraction, generation and failure recovery.

    Args:
        client: Anything with an ``async complete(body) -> str`` method;
            normally a ``CompletionClient``.
        settings: Request settings. Defaults to the client's own settings.
    """

    def __init__(self, client: CompletionClient, settings: Settings | None = None) -> None:
        self._client = client
        self._settings = settings or getattr(client, "settings", None) or Settings()
        self._state: WorkflowState = Idle()
        self._last_error: AppealWorkflowError | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def last_error(self) -> AppealWorkflowError | None:
        """The most recent failure, cleared by the next successful change."""
        return self._last_error

    @property
    def in_flight(self) -> bool:
        return isinstance(self._state, IN_FLIGHT_STATES)

    def _transition(self, new_state: WorkflowState) -> WorkflowState:
        allowed = _ALLOWED_TRANSITIONS[type(self._state)]
        if not isinstance(new_state, allowed):
            raise InvalidTransition(
                f"{state_name(self._state)} -> {state_name(new_state)} is not allowed"
            )
        if isinstance(new_state, Failed) and not isinstance(
            new_state.prior, (DocumentSelected, Extracted)
        ):
            raise InvalidTransition(f"Failed cannot retain {state_name(new_state.prior)}")

        logger.info("Workflow %s -> %s", state_name(self._state), state_name(new_state))
        self._state = new_state
        self._last_error = new_state.error if isinstance(new_state, Failed) else None
        return new_state

    def _stable_source(self) -> WorkflowState:
        if isinstance(self._state, Failed):
            return self._state.prior
        return self._state

    def select_document(self, candidate: UploadCandidate) -> WorkflowState:
        """Accept a new document, clearing any record, appeal and error.

        A no-op while a request is outstanding; the file is still validated.

        Raises:
            InvalidFileType: If the content type is unsupported. The state
                is left untouched.
        """
        document = validate_candidate(candidate)
        if self.in_flight:
            logger.info("Document selection ignored — %s in progress", state_name(self._state))
            return self._state
        return self._transition(DocumentSelected(document))

    async def run_extraction(self) -> WorkflowState:
        """Extract denial facts from the selected document.

        A no-op unless the controller holds a selected document (directly
        or as the retained state of a failure) and nothing is in flight.
        Never raises for workflow failures; they become ``Failed``.
        """
        if self.in_flight:
            logger.info("Extraction ignored — %s in progress", state_name(self._state))
            return self._state
        source = self._stable_source()
        if not isinstance(source, DocumentSelected):
            logger.info("Extraction ignored — no document selected (%s)", state_name(self._state))
            return self._state

        try:
            payload = encode_document(source.document)
        except IoFailure as exc:
            logger.warning("Could not encode %s: %s", source.document.filename, exc)
            self._last_error = exc
            return self._state

        self._transition(Extracting(source.document))
        try:
            record = await extract_denial(self._client, payload, self._settings)
        except AppealWorkflowError as exc:
            logger.error("Error processing document: %s", exc)
            return self._transition(
                Failed(prior=source, kind=exc.kind, message=EXTRACTION_FAILED_MESSAGE, error=exc)
            )

        return self._transition(Extracted(source.document, record))

    async def run_generation(self) -> WorkflowState:
        """Generate an appeal package from the extracted record.

        A no-op unless the controller holds an extracted record (directly or
        as the retained state of a failure) and nothing is in flight. A
        failure keeps the extracted record for retry.
        """
        if self.in_flight:
            logger.info("Generation ignored — %s in progress", state_name(self._state))
            return self._state
        source = self._stable_source()
        if not isinstance(source, Extracted):
            logger.info("Generation ignored — no extracted record (%s)", state_name(self._state))
            return self._state

        self._transition(GeneratingAppeal(source.document, source.record))
        try:
            package = await generate_appeal(self._client, source.record, self._settings)
        except AppealWorkflowError as exc:
            logger.error("Error generating appeal: %s", exc)
            return self._transition(
                Failed(prior=source, kind=exc.kind, message=GENERATION_FAILED_MESSAGE, error=exc)
            )

        return self._transition(AppealReady(source.document, source.record, package))

    def reset(self) -> WorkflowState:
        """Drop the document and every result, returning to ``Idle``.

        A no-op while a request is outstanding.
        """
        if self.in_flight:
            logger.info("Reset ignored — %s in progress", state_name(self._state))
            return self._state
        return self._transition(Idle())
