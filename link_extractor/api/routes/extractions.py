from fastapi import APIRouter, Depends, HTTPException

from link_extractor.api.deps import get_workspace
from link_extractor.schemas import ExtractionResponse, ExtractionStateResponse, ExtractRequest, InputRequest
from link_extractor.services.errors import ExtractionError, ExtractionInProgressError, RemoteError
from link_extractor.services.workspace import Workspace

router = APIRouter(prefix="/api/v1/extractions", tags=["extractions"])


def _state(workspace: Workspace) -> ExtractionStateResponse:
    orchestrator = workspace.orchestrator
    return ExtractionStateResponse(
        state=orchestrator.state,
        input_text=orchestrator.input_text,
        error=orchestrator.error,
        last_result=orchestrator.last_result,
    )


@router.get("/state", response_model=ExtractionStateResponse)
def extraction_state(workspace: Workspace = Depends(get_workspace)) -> ExtractionStateResponse:
    return _state(workspace)


@router.post("", response_model=ExtractionResponse)
async def run_extraction(payload: ExtractRequest, workspace: Workspace = Depends(get_workspace)) -> ExtractionResponse:
    orchestrator = workspace.orchestrator
    try:
        record = await orchestrator.extract(payload.input_url)
    except ExtractionInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (ExtractionError, RemoteError) as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if record is None:
        return ExtractionResponse(started=False)
    return ExtractionResponse(started=True, result=orchestrator.last_result, record=record)


@router.put("/input", response_model=ExtractionStateResponse)
def set_input(payload: InputRequest, workspace: Workspace = Depends(get_workspace)) -> ExtractionStateResponse:
    workspace.orchestrator.set_input(payload.text)
    return _state(workspace)


@router.post("/input/paste", response_model=ExtractionStateResponse)
async def paste_input(workspace: Workspace = Depends(get_workspace)) -> ExtractionStateResponse:
    await workspace.orchestrator.paste_from_clipboard(workspace.clipboard)
    return _state(workspace)


@router.delete("/input", response_model=ExtractionStateResponse)
def clear_input(workspace: Workspace = Depends(get_workspace)) -> ExtractionStateResponse:
    workspace.orchestrator.clear_input()
    return _state(workspace)
