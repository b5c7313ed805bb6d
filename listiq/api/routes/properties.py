"""Property routes: the working comparison list."""

from decimal import ROUND_HALF_UP

from fastapi import APIRouter, Depends, HTTPException, Response

from listiq.api.deps import get_workspace
from listiq.api.schemas import (
    BulkRemoveRequest,
    BulkRemoveResponse,
    FavoriteResponse,
    PaymentBreakdownResponse,
    PropertyCreate,
    PropertyFields,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
    SortOptionResponse,
    SortRequest,
)
from listiq.engine.comparison import ComparisonSummary, price_per_sqft
from listiq.engine.mortgage import TWO_PLACES
from listiq.engine.sorting import SORT_OPTIONS, SortOption, View
from listiq.errors import PropertyNotFound, PropertyValidationError
from listiq.models.property import Property
from listiq.workspace import ComparisonWorkspace

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


def _to_response(ws: ComparisonWorkspace, prop: Property, summary: ComparisonSummary) -> PropertyResponse:
    breakdown = ws.payment_breakdown(prop.id)
    ratio = price_per_sqft(prop)
    return PropertyResponse(
        **PropertyFields.from_property(prop).model_dump(),
        price_per_sqft=ratio.quantize(TWO_PLACES, ROUND_HALF_UP) if ratio is not None else None,
        is_favorite=prop.id in ws.favorite_ids,
        is_best_value=prop.id == summary.best_value_id,
        is_lowest_payment=prop.id == summary.lowest_payment_id,
        monthly_payment=PaymentBreakdownResponse.from_breakdown(breakdown) if breakdown else None,
    )


@router.get("", response_model=PropertyListResponse)
def list_properties(
    view: View = View.ALL,
    sort: str | None = None,
    ws: ComparisonWorkspace = Depends(get_workspace),
):
    """List properties in display order. ``sort`` overrides the saved preference for this call."""
    try:
        option = SortOption.parse(sort) if sort else ws.sort
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    summary = ws.comparison()
    return PropertyListResponse(
        sort=option.encode(),
        view=view,
        total_count=len(ws.properties),
        favorite_count=len(ws.favorite_ids),
        properties=[_to_response(ws, p, summary) for p in ws.visible_properties(view, option)],
    )


@router.get("/sort-options", response_model=list[SortOptionResponse])
def sort_options():
    return [SortOptionResponse(value=o.encode(), label=o.label) for o in SORT_OPTIONS]


@router.put("/sort", response_model=SortOptionResponse)
def set_sort(req: SortRequest, ws: ComparisonWorkspace = Depends(get_workspace)):
    """Persist the sort preference."""
    try:
        option = ws.set_sort(req.sort)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return SortOptionResponse(value=option.encode(), label=option.label)


@router.post("", response_model=PropertyResponse, status_code=201)
def add_property(req: PropertyCreate, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        prop = ws.add_property(**req.model_dump())
    except PropertyValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(ws, prop, ws.comparison())


@router.post("/remove", response_model=BulkRemoveResponse)
def remove_selected(req: BulkRemoveRequest, ws: ComparisonWorkspace = Depends(get_workspace)):
    return BulkRemoveResponse(removed=ws.remove_properties(req.ids))


@router.get("/{property_id}", response_model=PropertyResponse)
def get_property(property_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        prop = ws.get_property(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(ws, prop, ws.comparison())


@router.put("/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: str,
    req: PropertyUpdate,
    ws: ComparisonWorkspace = Depends(get_workspace),
):
    try:
        prop = ws.update_property(property_id, **req.model_dump(exclude_unset=True))
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PropertyValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _to_response(ws, prop, ws.comparison())


@router.delete("/{property_id}", status_code=204)
def remove_property(property_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        ws.remove_property(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.post("/{property_id}/favorite", response_model=FavoriteResponse)
def toggle_favorite(property_id: str, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        is_favorite = ws.toggle_favorite(property_id)
    except PropertyNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FavoriteResponse(id=property_id, is_favorite=is_favorite)
