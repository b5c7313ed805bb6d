"""AI comparison summary route."""

from fastapi import APIRouter, Depends

from listiq.api.deps import get_summarizer, get_workspace
from listiq.api.schemas import SummaryResponse
from listiq.data.summary import ComparisonSummarizer
from listiq.workspace import ComparisonWorkspace

router = APIRouter(prefix="/api/v1/summary", tags=["summary"])


@router.post("", response_model=SummaryResponse)
async def generate_summary(
    ws: ComparisonWorkspace = Depends(get_workspace),
    summarizer: ComparisonSummarizer = Depends(get_summarizer),
):
    """Summarize the current comparison. ``used_ai`` is False when the plain fallback was used."""
    narrative = await summarizer.summarize(list(ws.properties), ws.mortgage)
    return SummaryResponse(**narrative.model_dump())
