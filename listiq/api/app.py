"""FastAPI application entry point."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listiq.api.routes import comparison, mortgage, properties, searches, summary
from listiq.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="ListIQ",
    description="Compare real estate listings side by side",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(properties.router)
app.include_router(comparison.router)
app.include_router(mortgage.router)
app.include_router(searches.router)
app.include_router(summary.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
