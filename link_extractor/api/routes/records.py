from fastapi import APIRouter, Depends, HTTPException

from link_extractor.api.deps import get_workspace
from link_extractor.schemas import DeleteResponse, LinkFields, LinkRecord
from link_extractor.services.errors import RemoteError
from link_extractor.services.validation import ValidationError, require
from link_extractor.services.workspace import Workspace

router = APIRouter(prefix="/api/v1/records", tags=["records"])


@router.get("/{record_id}", response_model=LinkRecord)
async def fetch_record(record_id: str, workspace: Workspace = Depends(get_workspace)) -> LinkRecord:
    try:
        record = await workspace.store.get(record_id)
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    if record is None:
        raise HTTPException(status_code=404, detail=f"Record not found: {record_id}")
    return record


@router.post("", response_model=LinkRecord)
async def create_record(fields: LinkFields, workspace: Workspace = Depends(get_workspace)) -> LinkRecord:
    try:
        record = await workspace.store.create(fields)
        await workspace.history.refresh()
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return record


@router.patch("/{record_id}", response_model=LinkRecord)
async def update_record(record_id: str, fields: LinkFields, workspace: Workspace = Depends(get_workspace)) -> LinkRecord:
    try:
        require(bool(fields.model_fields_set or fields.model_extra), "At least one field is required")
        record = await workspace.store.update(record_id, fields)
        await workspace.history.refresh()
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return record


@router.delete("/{record_id}", response_model=DeleteResponse)
async def delete_record(record_id: str, workspace: Workspace = Depends(get_workspace)) -> DeleteResponse:
    try:
        deleted = await workspace.store.delete(record_id)
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    if deleted:
        workspace.history.remove_locally(record_id)
    return DeleteResponse(record_id=record_id, deleted=deleted)
