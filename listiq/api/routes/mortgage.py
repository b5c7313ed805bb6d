"""Mortgage settings routes."""

from fastapi import APIRouter, Depends, HTTPException

from listiq.api.deps import get_workspace
from listiq.api.schemas import MortgageSettingsSchema
from listiq.errors import InvalidInput
from listiq.workspace import ComparisonWorkspace

router = APIRouter(prefix="/api/v1/mortgage", tags=["mortgage"])


@router.get("/settings", response_model=MortgageSettingsSchema)
def get_settings(ws: ComparisonWorkspace = Depends(get_workspace)):
    return MortgageSettingsSchema.from_settings(ws.mortgage)


@router.put("/settings", response_model=MortgageSettingsSchema)
def update_settings(req: MortgageSettingsSchema, ws: ComparisonWorkspace = Depends(get_workspace)):
    try:
        mortgage = ws.update_mortgage_settings(req.to_settings())
    except InvalidInput as e:
        raise HTTPException(status_code=422, detail=str(e))
    return MortgageSettingsSchema.from_settings(mortgage)
