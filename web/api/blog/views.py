"""Blog article and analytics API views."""

from typing import Any

import pydantic
from fastapi import APIRouter, Body, Depends, Request

from app.container import container
from web.api.errors import ValidationError, require_admin

from .schemas import (
    AnalyticsSummaryResponse,
    ArticleListResponse,
    ToggleHeroRequest,
    TrackRequest,
    TrackResponse,
)

router = APIRouter(tags=["blog"])


@router.post("/api/blogs/save", dependencies=[Depends(require_admin)])
def save_article(payload: dict[str, Any] = Body(...)) -> dict:
    return container.blog_articles.save(payload)


@router.get("/api/blogs/list", response_model=ArticleListResponse)
def list_articles() -> ArticleListResponse:
    posts = container.blog_articles.list_articles()
    return ArticleListResponse(blogPosts=posts, count=len(posts))


@router.get("/api/blogs/get/{slug}")
def get_article(slug: str) -> dict:
    return container.blog_articles.get(slug)


@router.delete("/api/blogs/delete", dependencies=[Depends(require_admin)])
def delete_article(slug: str | None = None) -> dict:
    return container.blog_articles.delete(slug)


@router.post("/api/blogs/toggle-hero", dependencies=[Depends(require_admin)])
def toggle_hero(body: ToggleHeroRequest) -> dict:
    return container.blog_articles.toggle_hero(body.slug, body.isHero)


async def _track_payload(request: Request) -> TrackRequest:
    """Beacons post JSON or a form (navigator.sendBeacon)."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
        data = dict(await request.form())
    else:
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError("Invalid request body") from None
    if not isinstance(data, dict):
        raise ValidationError("Invalid request body")

    try:
        return TrackRequest.model_validate(data)
    except pydantic.ValidationError:
        raise ValidationError("Invalid request body") from None


@router.post("/api/blog-analytics/track", response_model=TrackResponse)
def track(payload: TrackRequest = Depends(_track_payload)) -> TrackResponse:
    return TrackResponse(**container.blog_analytics.track(payload.slug, payload.sessionId, payload.readTime))


@router.get("/api/blog-analytics/{slug}", response_model=AnalyticsSummaryResponse)
def analytics_summary(slug: str) -> AnalyticsSummaryResponse:
    return AnalyticsSummaryResponse(**container.blog_analytics.summary(slug))
