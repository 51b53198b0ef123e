"""API routes — thin controllers that delegate to the use case."""

from __future__ import annotations

import asyncio
import base64
import binascii

from fastapi import APIRouter, Depends

from insight_engine.domain.entities import ContentClassification, ProviderConfig
from insight_engine.domain.exceptions import UnsupportedDocumentError
from insight_engine.domain.ports.repo_fetcher import RepoFetcher
from insight_engine.domain.value_objects import GitHubUrl
from insight_engine.infrastructure.config import Settings
from insight_engine.interface.dependencies import (
    get_app_settings,
    get_repo_fetcher,
    get_use_case,
)
from insight_engine.interface.schemas import (
    AnalyzeDocumentRequest,
    AnalyzeRepositoryRequest,
    AnalyzeTextRequest,
    BackendChoice,
    InsightResponse,
)
from insight_engine.services.document_extractor import extract_document
from insight_engine.services.synthesize_insights import SynthesizeInsightsUseCase

router = APIRouter(prefix="/insights")


def _provider_config(body: BackendChoice, settings: Settings) -> ProviderConfig | None:
    return settings.provider_config(body.provider, body.api_key_value, body.model)


@router.post("", response_model=InsightResponse)
async def analyze_text(
    body: AnalyzeTextRequest,
    use_case: SynthesizeInsightsUseCase = Depends(get_use_case),
    settings: Settings = Depends(get_app_settings),
) -> InsightResponse:
    """Analyse arbitrary text."""
    result = await use_case.synthesize_with_provenance(
        body.content,
        body.classification,
        None,
        _provider_config(body, settings),
    )
    return InsightResponse.from_result(result)


@router.post(
    "/repository",
    response_model=InsightResponse,
    responses={
        422: {"description": "Invalid GitHub URL"},
        403: {"description": "Repository is private"},
        404: {"description": "Repository not found"},
        429: {"description": "GitHub API rate limit exceeded"},
        502: {"description": "GitHub content could not be fetched"},
    },
)
async def analyze_repository(
    body: AnalyzeRepositoryRequest,
    use_case: SynthesizeInsightsUseCase = Depends(get_use_case),
    fetcher: RepoFetcher = Depends(get_repo_fetcher),
    settings: Settings = Depends(get_app_settings),
) -> InsightResponse:
    """Analyse a public GitHub repository from its metadata and README."""
    url = GitHubUrl.from_string(body.github_url)
    metadata, readme = await asyncio.gather(
        fetcher.fetch_metadata(url),
        fetcher.fetch_readme(url),
    )
    result = await use_case.synthesize_with_provenance(
        readme,
        ContentClassification.GITHUB_REPOSITORY,
        metadata,
        _provider_config(body, settings),
    )
    return InsightResponse.from_result(result)


@router.post(
    "/document",
    response_model=InsightResponse,
    responses={422: {"description": "Unsupported or undecodable document"}},
)
async def analyze_document(
    body: AnalyzeDocumentRequest,
    use_case: SynthesizeInsightsUseCase = Depends(get_use_case),
    settings: Settings = Depends(get_app_settings),
) -> InsightResponse:
    """Analyse an uploaded document sent as base64."""
    try:
        data = base64.b64decode(body.content_base64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UnsupportedDocumentError("contentBase64 is not valid base64.") from exc

    document = extract_document(body.file_name, data)
    result = await use_case.synthesize_with_provenance(
        document.text,
        None,
        document.metadata,
        _provider_config(body, settings),
    )
    return InsightResponse.from_result(result)
