#!/usr/bin/env python3
"""
HTTP routes.

Handlers are thin: they pull services from the request's container, call
one operation and wrap the result in the success envelope. Errors propagate
to the exception handlers in ``api.app``.
"""

import logging
import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import Response

from core.container import Container
from api.schemas import VoteRequest, AnalyzeRequest, GuestRequest, DeleteFilesRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def get_services(request: Request) -> Container:
    return request.app.state.container


def ok(data) -> dict:
    return {"success": True, "data": data}


# ----- Articles -----

@router.get("/articles")
def get_articles(id: Optional[str] = Query(None), services: Container = Depends(get_services)):
    result = services.get('news_service').get_articles(id)
    if id:
        return ok(result.to_dict())
    return ok([article.to_dict() for article in result])


@router.get("/news")
def get_news(
    q: str = Query("", description="Free-text search"),
    from_date: Optional[str] = Query(None, alias="from", description="ISO date lower bound"),
    sort_by: str = Query("publishedAt", alias="sortBy"),
    page: int = Query(1),
    guest_id: Optional[str] = Query(None, alias="guestId"),
    services: Container = Depends(get_services),
):
    news_page = services.get('news_service').get_news(q, from_date or None, sort_by, page, guest_id)
    return news_page.to_dict()


# ----- Votes -----

@router.get("/votes")
def get_votes(article_id: str = Query(..., alias="articleId"), services: Container = Depends(get_services)):
    return ok(services.get('vote_service').get_vote_counts(article_id).to_dict())


@router.post("/votes")
def cast_vote(body: VoteRequest, services: Container = Depends(get_services)):
    outcome = services.get('vote_service').cast_vote(body.articleId, body.guestId, body.voteType)
    return ok(outcome.to_dict())


@router.get("/user-vote")
def get_user_vote(
    article_id: str = Query(..., alias="articleId"),
    guest_id: str = Query(..., alias="guestId"),
    services: Container = Depends(get_services),
):
    vote_type = services.get('vote_service').get_user_vote(article_id, guest_id)
    return ok({"voteType": vote_type.value if vote_type else None})


# ----- Analysis -----

@router.post("/analyze-article")
def analyze_article(body: AnalyzeRequest, services: Container = Depends(get_services)):
    analysis = services.get('analysis_service').analyze(body.articleId)
    return ok(analysis.to_dict())


# ----- Guests -----

@router.post("/guests")
def register_guest(body: Optional[GuestRequest] = None, services: Container = Depends(get_services)):
    guest = services.get('guest_service').register(body.guestId if body else None)
    return ok(guest.to_dict())


# ----- Regulations -----

@router.get("/regulations/documents")
def search_documents(q: str = Query(""), services: Container = Depends(get_services)):
    return ok(services.get('regulations_client').search_documents(q))


@router.get("/regulations/documents/{document_id}")
def get_document(document_id: str, services: Container = Depends(get_services)):
    return ok(services.get('regulations_client').get_document(document_id))


@router.get("/regulations/documents/{document_id}/comments")
def search_comments(document_id: str, q: str = Query(""), services: Container = Depends(get_services)):
    return ok(services.get('regulations_client').search_comments(document_id, q))


# ----- Storage -----

@router.post("/storage/files")
def upload_file(
    file: UploadFile = File(...),
    folder: str = Form("images"),
    services: Container = Depends(get_services),
):
    data = file.file.read()
    stored = services.get('storage_service').upload(file.filename, data, file.content_type, folder)
    return ok(stored)


@router.get("/storage/files")
def list_files(folder: str = Query(""), services: Container = Depends(get_services)):
    return ok(services.get('storage_service').list(folder))


@router.get("/storage/files/{path:path}")
def download_file(path: str, services: Container = Depends(get_services)):
    data = services.get('storage_service').download(path)
    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)


@router.delete("/storage/files")
def delete_files(body: DeleteFilesRequest, services: Container = Depends(get_services)):
    deleted = services.get('storage_service').delete(body.paths)
    return ok({"deleted": deleted})


# ----- Health -----

@router.get("/health")
def health(services: Container = Depends(get_services)):
    config = services.get('config')
    database = services.get('database').health_check()
    return {
        "status": "ok" if database.get('connected') else "degraded",
        "database": database,
        "integrations": config.integration_status(),
    }
