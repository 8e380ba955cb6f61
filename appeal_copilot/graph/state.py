"""State definitions for the document-to-appeal workflow."""

from dataclasses import dataclass
from typing import Any, TypedDict, Union

from appeal_copilot.errors import AppealWorkflowError, ErrorKind
from appeal_copilot.models import AppealPackage, Document, ExtractedRecord


@dataclass(frozen=True)
class Idle:
    """No document selected."""


@dataclass(frozen=True)
class DocumentSelected:
    document: Document


@dataclass(frozen=True)
class Extracting:
    """An extraction request is outstanding."""

    document: Document


@dataclass(frozen=True)
class Extracted:
    document: Document
    record: ExtractedRecord


@dataclass(frozen=True)
class GeneratingAppeal:
    """An appeal generation request is outstanding."""

    document: Document
    record: ExtractedRecord


@dataclass(frozen=True)
class AppealReady:
    document: Document
    record: ExtractedRecord
    package: AppealPackage


StableState = Union[DocumentSelected, Extracted]


@dataclass(frozen=True)
class Failed:
    """An operation failed; ``prior`` is the stable state to retry from.

    Attributes:
        prior: The last stable state before the failed operation.
        kind: The failure class.
        message: Advisory message for end users.
        error: The underlying exception, kept for diagnostics.
    """

    prior: StableState
    kind: ErrorKind
    message: str
    error: AppealWorkflowError | None = None


WorkflowState = Union[
    Idle,
    DocumentSelected,
    Extracting,
    Extracted,
    GeneratingAppeal,
    AppealReady,
    Failed,
]

IN_FLIGHT_STATES: tuple[type, ...] = (Extracting, GeneratingAppeal)


def state_name(state: WorkflowState) -> str:
    return type(state).__name__


class AppealPipelineState(TypedDict):
    """Typed state passed through every node in the one-shot appeal graph.

    Attributes:
        controller: The workflow controller driven by the graph nodes.
        filename: Name of the uploaded file, for logging.
        status: Name of the controller state after the last node.
        extracted: Extracted record keyed by wire names, once available.
        appeal: Appeal package keyed by wire names, once available.
        letter: Assembled plain-text appeal document, once available.
        error: Failure details (kind, message, detail) if a step failed.
    """

    controller: Any
    filename: str
    status: str
    extracted: dict[str, Any]
    appeal: dict[str, Any]
    letter: str
    error: dict[str, Any] | None
