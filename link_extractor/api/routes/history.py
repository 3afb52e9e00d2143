from fastapi import APIRouter, Depends, HTTPException, Query

from link_extractor.api.deps import get_workspace
from link_extractor.schemas import HistoryResponse
from link_extractor.services.errors import RemoteError
from link_extractor.services.workspace import Workspace

router = APIRouter(prefix="/api/v1/history", tags=["history"])


def _history(workspace: Workspace, query: str) -> HistoryResponse:
    items = workspace.history.search(query)
    return HistoryResponse(query=query, total=len(items), items=items, error=workspace.history.last_error)


@router.get("", response_model=HistoryResponse)
def list_history(q: str = Query(default=""), workspace: Workspace = Depends(get_workspace)) -> HistoryResponse:
    return _history(workspace, q)


@router.post("/refresh", response_model=HistoryResponse)
async def refresh_history(workspace: Workspace = Depends(get_workspace)) -> HistoryResponse:
    try:
        await workspace.history.refresh()
    except RemoteError as exc:
        raise HTTPException(status_code=502, detail=exc.message) from exc
    return _history(workspace, "")
