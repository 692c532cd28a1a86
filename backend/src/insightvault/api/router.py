"""API router aggregation."""

from fastapi import APIRouter

from insightvault.api.analysis import router as analysis_router
from insightvault.api.entries import router as entries_router
from insightvault.api.knowledge_base import router as knowledge_base_router
from insightvault.api.prompts import router as prompts_router

api_router = APIRouter()
api_router.include_router(prompts_router, tags=["prompts"])
api_router.include_router(analysis_router, tags=["analysis"])
api_router.include_router(entries_router, tags=["entries"])
api_router.include_router(knowledge_base_router)
