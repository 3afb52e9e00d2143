from fastapi import APIRouter, Depends, HTTPException

from link_extractor.api.deps import get_workspace
from link_extractor.enums import DeleteState
from link_extractor.schemas import CopyRequest, DeleteConfirmationRequest, DeleteResponse, UiStateResponse
from link_extractor.services.errors import RemoteError
from link_extractor.services.workspace import Workspace

router = APIRouter(prefix="/api/v1/ui", tags=["ui"])


def _ui_state(workspace: Workspace) -> UiStateResponse:
    return UiStateResponse(
        copy_state=workspace.copy_ack.state,
        copied_key=workspace.copy_ack.copied_key,
        delete_state=workspace.delete_confirmation.state,
        delete_target=workspace.delete_confirmation.target,
    )


@router.get("/state", response_model=UiStateResponse)
def ui_state(workspace: Workspace = Depends(get_workspace)) -> UiStateResponse:
    return _ui_state(workspace)


@router.post("/copy", response_model=UiStateResponse)
async def copy_text(payload: CopyRequest, workspace: Workspace = Depends(get_workspace)) -> UiStateResponse:
    await workspace.copy_ack.copy(payload.text, payload.key, workspace.clipboard)
    return _ui_state(workspace)


@router.post("/delete-confirmation", response_model=UiStateResponse)
def request_delete(payload: DeleteConfirmationRequest, workspace: Workspace = Depends(get_workspace)) -> UiStateResponse:
    record = workspace.history.get(payload.record_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record not found: {payload.record_id}")
    if not workspace.delete_confirmation.request(record):
        raise HTTPException(status_code=409, detail="A delete is already in progress")
    return _ui_state(workspace)


@router.post("/delete-confirmation/cancel", response_model=UiStateResponse)
def cancel_delete(workspace: Workspace = Depends(get_workspace)) -> UiStateResponse:
    workspace.delete_confirmation.cancel()
    return _ui_state(workspace)


@router.post("/delete-confirmation/confirm", response_model=DeleteResponse)
async def confirm_delete(workspace: Workspace = Depends(get_workspace)) -> DeleteResponse:
    if workspace.delete_confirmation.state == DeleteState.deleting:
        raise HTTPException(status_code=409, detail="A delete is already in progress")
    target = workspace.delete_confirmation.target
    if target is None:
        raise HTTPException(status_code=400, detail="No delete is pending")
    try:
        deleted = await workspace.delete_confirmation.confirm()
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return DeleteResponse(record_id=target.record_id, deleted=deleted)
