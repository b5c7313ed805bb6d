"""Saved search routes: save, load, delete, share and import."""

from fastapi import APIRouter, Depends, HTTPException, Response

from listiq.api.deps import get_workspace
from listiq.api.schemas import ImportSearchRequest, SaveSearchRequest, SavedSearchResponse, ShareResponse
from listiq.config import settings
from listiq.data import share
from listiq.errors import InvalidInput, SearchNameConflict, SearchNotFound, SharedSearchError
from listiq.workspace import ComparisonWorkspace

router = APIRouter(prefix="/api/v1/searches", tags=["searches"])


@router.get("", response_model=list[SavedSearchResponse])
def list_searches(ws: ComparisonWorkspace = Depends(get_workspace)):
    return [SavedSearchResponse.from_search(s) for s in ws.saved_searches]


@router.post("", response_model=SavedSearchResponse, status_code=201)
def save_search(req: SaveSearchRequest, ws: ComparisonWorkspace = Depends(get_workspace)):
    """Snapshot the current list. A taken name returns 409 unless ``overwrite`` is set."""
    try:
        search = ws.save_search(req.name, overwrite=req.overwrite)
    except SearchNameConflict as e:
        raise HTTPException(
            status_code=409,
            detail={"message": str(e), "existing_id": e.existing_id},
        )
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SavedSearchResponse.from_search(search)


@router.post("/import", response_model=SavedSearchResponse, status_code=201)
def import_search(req: ImportSearchRequest, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        search = ws.import_shared(req.payload, from_link=req.from_link)
    except SharedSearchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SavedSearchResponse.from_search(search)


@router.get("/{search_id}", response_model=SavedSearchResponse)
def get_search(search_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        return SavedSearchResponse.from_search(ws.get_search(search_id))
    except SearchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{search_id}/load", response_model=SavedSearchResponse)
def load_search(search_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    """Replace the working list with the saved snapshot."""
    try:
        return SavedSearchResponse.from_search(ws.load_search(search_id))
    except SearchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{search_id}", status_code=204)
def delete_search(search_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        ws.delete_search(search_id)
    except SearchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/{search_id}/share", response_model=ShareResponse)
def share_search(search_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        search = ws.get_search(search_id)
    except SearchNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ShareResponse(
        code=share.encode_share_code(search),
        url=share.share_url(search, settings.share_base_url),
        filename=share.export_filename(search),
        json_export=share.export_search_json(search),
    )
