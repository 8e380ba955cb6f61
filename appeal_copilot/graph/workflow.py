"""LangGraph workflow definition for the one-shot appeal pipeline."""

import logging
from typing import Any

from langgraph.graph import END, START, StateGraph

from appeal_copilot.config import Settings
from appeal_copilot.graph.controller import AppealWorkflowController
from appeal_copilot.graph.nodes.llm_client import CompletionClient
from appeal_copilot.graph.state import (
    AppealPipelineState,
    AppealReady,
    Extracted,
    Failed,
    state_name,
)
from appeal_copilot.models import UploadCandidate
from appeal_copilot.services.assembler import assemble_appeal

logger = logging.getLogger(__name__)


def _failure_details(controller: AppealWorkflowController) -> dict[str, Any] | None:
    state = controller.state
    if isinstance(state, Failed):
        return {
            "kind": state.kind.value,
            "message": state.message,
            "detail": str(state.error) if state.error else "",
        }
    error = controller.last_error
    if error is not None:
        return {"kind": error.kind.value, "message": error.user_message, "detail": str(error)}
    return None


async def extract_node(state: AppealPipelineState) -> dict[str, Any]:
    """Run extraction on the controller and publish the record."""
    controller: AppealWorkflowController = state["controller"]
    result = await controller.run_extraction()
    logger.info("Extract node — file=%s state=%s", state["filename"], state_name(result))
    update: dict[str, Any] = {"status": state_name(result), "error": _failure_details(controller)}
    if isinstance(result, Extracted):
        update["extracted"] = result.record.to_wire()
    return update


async def generate_node(state: AppealPipelineState) -> dict[str, Any]:
    """Run appeal generation on the controller and publish the package."""
    controller: AppealWorkflowController = state["controller"]
    result = await controller.run_generation()
    logger.info("Generate node — file=%s state=%s", state["filename"], state_name(result))
    update: dict[str, Any] = {"status": state_name(result), "error": _failure_details(controller)}
    if isinstance(result, AppealReady):
        update["appeal"] = result.package.to_wire()
    return update


def assemble_node(state: AppealPipelineState) -> dict[str, Any]:
    """Render the finished package as the downloadable letter text."""
    controller: AppealWorkflowController = state["controller"]
    ready = controller.state
    if not isinstance(ready, AppealReady):
        return {}
    return {"letter": assemble_appeal(ready.package)}


def _route_after_extract(state: AppealPipelineState) -> str:
    if isinstance(state["controller"].state, Extracted):
        return "generate"
    return END


def _route_after_generate(state: AppealPipelineState) -> str:
    if isinstance(state["controller"].state, AppealReady):
        return "assemble"
    return END


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------

graph_builder = StateGraph(AppealPipelineState)

# Nodes
graph_builder.add_node("extract", extract_node)
graph_builder.add_node("generate", generate_node)
graph_builder.add_node("assemble", assemble_node)

# Edges
graph_builder.add_edge(START, "extract")
graph_builder.add_conditional_edges("extract", _route_after_extract, ["generate", END])
graph_builder.add_conditional_edges("generate", _route_after_generate, ["assemble", END])
graph_builder.add_edge("assemble", END)

# Compile once at module level
workflow = graph_builder.compile()

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def run_appeal_workflow(
    candidate: UploadCandidate,
    client: CompletionClient,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Take one uploaded denial document all the way to an appeal letter.

    Args:
        candidate: The uploaded file.
        client: Completion client used for both requests.
        settings: Optional request settings override.

    Returns:
        A dict with ``status`` (final controller state name), ``extracted``,
        ``appeal``, ``letter`` and ``error`` (``None`` on success).

    Raises:
        InvalidFileType: If the upload's content type is unsupported.
    """
    controller = AppealWorkflowController(client, settings)
    controller.select_document(candidate)

    initial_state: AppealPipelineState = {
        "controller": controller,
        "filename": candidate.filename,
        "status": state_name(controller.state),
        "extracted": {},
        "appeal": {},
        "letter": "",
        "error": None,
    }

    logger.info("Workflow started — file=%s bytes=%d", candidate.filename, candidate.size)
    result = await workflow.ainvoke(initial_state)
    logger.info("Workflow completed — file=%s status=%s", candidate.filename, result["status"])

    return {
        "status": result["status"],
        "extracted": result["extracted"],
        "appeal": result["appeal"],
        "letter": result["letter"],
        "error": result["error"],
    }
