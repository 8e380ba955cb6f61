"""API route definitions for the appeal copilot."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response

from appeal_copilot.errors import ErrorKind, InvalidFileType
from appeal_copilot.graph.controller import AppealWorkflowController
from appeal_copilot.graph.nodes.llm_client import CompletionClient, get_completion_client
from appeal_copilot.graph.state import Extracted, Failed
from appeal_copilot.graph.workflow import run_appeal_workflow
from appeal_copilot.models import AppealPackage, UploadCandidate
from appeal_copilot.services.assembler import export_artifact

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_candidate(file: UploadFile) -> UploadCandidate:
    """Read an uploaded file into an ``UploadCandidate``.

    Raises:
        HTTPException: If the upload cannot be read.
    """
    try:
        content = await file.read()
    except Exception as exc:
        logger.exception("Failed to read uploaded file")
        raise HTTPException(status_code=500, detail="Failed to read uploaded file.") from exc
    return UploadCandidate(
        filename=file.filename or "upload",
        content_type=file.content_type or "",
        content=content,
    )


def _invalid_type(exc: InvalidFileType) -> HTTPException:
    return HTTPException(status_code=400, detail=exc.user_message)


def _error_response(error: dict[str, Any], result: dict[str, Any] | None = None) -> JSONResponse:
    """Map a workflow failure to 422 (unreadable file) or 502 (completion service).

    A record extracted before the failure is returned with the error so the
    caller keeps it.
    """
    status_code = 422 if error["kind"] == ErrorKind.IO_FAILURE.value else 502
    content: dict[str, Any] = {"detail": error["message"], "error": error["kind"]}
    if result is not None and result["extracted"]:
        content["status"] = result["status"]
        content["extracted"] = result["extracted"]
    return JSONResponse(status_code=status_code, content=content)


@router.post("/api/extract", status_code=200, response_model=None)
async def extract_denial_details(
    file: UploadFile = File(..., description="Denial letter (PDF, JPG or PNG)"),
    client: CompletionClient = Depends(get_completion_client),
) -> dict[str, Any] | JSONResponse:
    """Extract the denial facts from an uploaded document.

    Args:
        file: The denial letter.
        client: Completion client, injected.

    Returns:
        A dict with the filename, status and the extracted record.
    """
    candidate = await _read_candidate(file)
    controller = AppealWorkflowController(client)
    try:
        controller.select_document(candidate)
    except InvalidFileType as exc:
        raise _invalid_type(exc) from exc

    state = await controller.run_extraction()
    if isinstance(state, Extracted):
        return {
            "filename": candidate.filename,
            "status": "extracted",
            "extracted": state.record.to_wire(),
        }

    if isinstance(state, Failed):
        error = {"kind": state.kind.value, "message": state.message}
    else:
        last = controller.last_error
        error = {
            "kind": last.kind.value if last else ErrorKind.IO_FAILURE.value,
            "message": last.user_message if last else "Failed to read file.",
        }
    logger.warning("Extraction failed — file=%s error=%s", candidate.filename, error["kind"])
    return _error_response(error)


async def _run_pipeline(file: UploadFile, client: CompletionClient) -> dict[str, Any]:
    candidate = await _read_candidate(file)
    try:
        result = await run_appeal_workflow(candidate, client)
    except InvalidFileType as exc:
        raise _invalid_type(exc) from exc
    result["filename"] = candidate.filename
    return result


@router.post("/api/appeal", status_code=200, response_model=None)
async def create_appeal(
    file: UploadFile = File(..., description="Denial letter (PDF, JPG or PNG)"),
    client: CompletionClient = Depends(get_completion_client),
) -> dict[str, Any] | JSONResponse:
    """Run the full pipeline: extract, generate and assemble the appeal.

    Returns:
        A dict with the filename, status, extracted record, appeal package
        and assembled letter text.
    """
    result = await _run_pipeline(file, client)
    if result["error"] is not None:
        return _error_response(result["error"], result)
    return {
        "filename": result["filename"],
        "status": "appeal_ready",
        "extracted": result["extracted"],
        "appeal": result["appeal"],
        "letter": result["letter"],
    }


@router.post("/api/appeal/letter", status_code=200, response_model=None)
async def download_appeal_letter(
    file: UploadFile = File(..., description="Denial letter (PDF, JPG or PNG)"),
    client: CompletionClient = Depends(get_completion_client),
) -> Response:
    """Run the full pipeline and return the letter as a text attachment."""
    result = await _run_pipeline(file, client)
    if result["error"] is not None:
        return _error_response(result["error"], result)

    artifact = export_artifact(AppealPackage.model_validate(result["appeal"]))
    return Response(
        content=artifact.data,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'attachment; filename="{artifact.filename}"'},
    )


@router.get("/health", status_code=200)
async def health_check() -> dict[str, str]:
    """Liveness / readiness health check endpoint.

    Returns:
        A dict with the current service status.
    """
    return {"status": "ok"}
