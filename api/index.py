"""
FastAPI wrapper for SEO Alignment Analyzer - Vercel Serverless Function.

This module exposes alignment analysis and content enhancement as a REST
API. Providers are created per request and closed when it finishes.
"""

import logging
import os
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from seo_alignment_analyzer import __version__
from seo_alignment_analyzer.analyzer import SemanticAlignmentAnalyzer
from seo_alignment_analyzer.config import AnalysisConfig
from seo_alignment_analyzer.diff import compute_contextual_diff, get_changes_summary
from seo_alignment_analyzer.embeddings import EmbeddingProvider, create_embedding_provider
from seo_alignment_analyzer.errors import (
    AnalysisError,
    InvalidInputError,
    ProviderAuthError,
    ProviderRateLimitedError,
)
from seo_alignment_analyzer.llm_client import CompletionProvider, LLMClient
from seo_alignment_analyzer.models import AnalysisMode, AnalysisRequest, Keyword, SectionImprovement
from seo_alignment_analyzer.prompt_builder import enhance_text

logger = logging.getLogger(__name__)

app = FastAPI(
    title="SEO Alignment Analyzer API",
    description="Scores copy against weighted target keywords and a competitor, and suggests improvements",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

INVALID_INPUT_MESSAGE = "Invalid input data. Please check your inputs and try again."


class KeywordInput(BaseModel):
    """Single keyword input model."""
    text: str = Field(..., min_length=1)
    weight: float = Field(1.0, ge=0.1, le=10)


class AnalyzeRequest(BaseModel):
    """Request model for alignment analysis."""
    model_config = ConfigDict(populate_by_name=True)

    keywords: list[KeywordInput] = Field(..., min_length=1, max_length=50)
    main_copy: str = Field(..., alias="mainCopy", min_length=1, max_length=50000)
    competitor_copy: str = Field(..., alias="competitorCopy", min_length=1, max_length=50000)
    analysis_mode: Literal["full", "chunked"] = Field("full", alias="analysisMode")
    api_key: Optional[str] = Field(None, alias="apiKey", description="Overrides OPENAI_API_KEY")


class ImprovementInput(BaseModel):
    """Section improvement as returned by /api/analyze."""
    model_config = ConfigDict(populate_by_name=True)

    section: str
    current_score: float = Field(0.0, alias="currentScore")
    missing_keywords: list[str] = Field(default_factory=list, alias="missingKeywords")
    suggested_phrases: list[str] = Field(default_factory=list, alias="suggestedPhrases")
    competitor_strengths: list[str] = Field(default_factory=list, alias="competitorStrengths")


class EnhanceRequest(BaseModel):
    """Request model for content enhancement."""
    model_config = ConfigDict(populate_by_name=True)

    original_text: str = Field(..., alias="originalText", min_length=1, max_length=50000)
    improvements: list[ImprovementInput] = Field(default_factory=list)
    api_key: Optional[str] = Field(None, alias="apiKey", description="Overrides ANTHROPIC_API_KEY")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str


def build_embedding_provider(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> EmbeddingProvider:
    """Create the embedding provider for one request."""
    name = os.environ.get("SEO_ALIGN_EMBEDDING_PROVIDER", "openai")
    return create_embedding_provider(name, api_key=api_key, model=model)


def build_completion_provider(api_key: Optional[str] = None) -> CompletionProvider:
    """Create the completion provider for one request."""
    config = AnalysisConfig()
    return LLMClient(
        api_key=api_key,
        model=config.completion_model,
        max_tokens=config.completion_max_tokens,
        temperature=config.completion_temperature,
    )


def _close(provider) -> None:
    close = getattr(provider, "close", None)
    if close is not None:
        close()


def _error_response(error: AnalysisError) -> HTTPException:
    """Map an analysis failure onto an HTTP status and a user-facing message."""
    if isinstance(error, InvalidInputError):
        return HTTPException(status_code=400, detail=str(error) or INVALID_INPUT_MESSAGE)
    if isinstance(error, ProviderAuthError):
        return HTTPException(status_code=401, detail=error.user_message)
    if isinstance(error, ProviderRateLimitedError):
        return HTTPException(status_code=429, detail=error.user_message)
    return HTTPException(status_code=500, detail=error.user_message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report schema violations as 400 like any other invalid input."""
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": INVALID_INPUT_MESSAGE})


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/api/analyze")
def analyze(request: AnalyzeRequest):
    """
    Score main and competitor copy against the keywords.

    Returns the analysis result with camelCase field names.
    """
    config = AnalysisConfig(
        analysis_mode=request.analysis_mode,
        embedding_model=os.environ.get("SEO_ALIGN_EMBEDDING_MODEL") or None,
    )
    analysis_request = AnalysisRequest(
        keywords=[Keyword(text=k.text.strip(), weight=k.weight) for k in request.keywords],
        main_text=request.main_copy,
        competitor_text=request.competitor_copy,
        mode=AnalysisMode(request.analysis_mode),
    )

    try:
        provider = build_embedding_provider(request.api_key, config.embedding_model)
        try:
            result = SemanticAlignmentAnalyzer(provider, config).analyze(analysis_request)
        finally:
            _close(provider)
    except AnalysisError as e:
        logger.error(f"Analysis error: {e}")
        raise _error_response(e) from e
    except Exception as e:
        logger.exception("Unexpected analysis failure")
        raise HTTPException(status_code=500, detail=AnalysisError.user_message) from e

    return result.to_dict()


@app.post("/api/enhance")
def enhance(request: EnhanceRequest):
    """
    Rewrite text with the recommended keywords.

    Returns the enhanced text, a contextual diff against the original and a
    summary of the changes.
    """
    improvements = [
        SectionImprovement(
            section_title=imp.section,
            current_score_percent=imp.current_score,
            missing_keywords=imp.missing_keywords,
            suggested_phrases=imp.suggested_phrases,
            competitor_strengths=imp.competitor_strengths,
        )
        for imp in request.improvements
    ]

    try:
        provider = build_completion_provider(request.api_key)
        try:
            enhanced = enhance_text(provider, request.original_text, improvements)
        finally:
            _close(provider)
    except AnalysisError as e:
        logger.error(f"Enhancement error: {e}")
        raise _error_response(e) from e
    except Exception as e:
        logger.exception("Unexpected enhancement failure")
        raise HTTPException(status_code=500, detail=AnalysisError.user_message) from e

    segments = compute_contextual_diff(request.original_text, enhanced, improvements)
    return {
        "enhancedText": enhanced,
        "diff": [s.to_dict() for s in segments],
        "summary": get_changes_summary(segments),
    }


@app.get("/api/info")
async def api_info():
    """Get API information and usage instructions."""
    return {
        "name": "SEO Alignment Analyzer API",
        "version": __version__,
        "endpoints": {
            "GET /api/health": "Health check",
            "POST /api/analyze": "Score copy against keywords and a competitor",
            "POST /api/enhance": "Rewrite copy with recommended keywords",
            "GET /api/info": "This endpoint",
        },
        "documentation": "/docs",
        "openapi": "/openapi.json",
    }
