"""Memo CRUD routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from memopad.config import settings
from memopad.content import error_response, read_model, render_response
from memopad.database import get_db_session
from memopad.models import (
    ErrorResponse,
    MemoListResponse,
    MemoResponse,
    MemoWriteRequest,
    MessageResponse,
)
from memopad.rate_limit import limiter
from memopad.services.memos import create_memo, delete_memo, get_memo, list_memos, update_memo

router = APIRouter()


def parse_id(raw: str) -> int | None:
    try:
        return int(raw)
    except ValueError:
        return None


async def _read_memo_body(request: Request) -> MemoWriteRequest | str:
    """Validated memo fields, or the error message to report."""
    req = await read_model(request, MemoWriteRequest)
    if isinstance(req, str):
        return req
    if not req.title.strip():
        return "Title is required"
    return req


@router.get("/api/memos", response_model=MemoListResponse)
@limiter.limit(settings.rate_limit_read)
async def memos_index(
    request: Request,
    session=Depends(get_db_session),
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    """List memos, most recently updated first."""
    memos, total = await list_memos(session, offset=offset, limit=limit)
    return render_response(request, MemoListResponse(memos=memos, total=total))


@router.post(
    "/api/memos",
    response_model=MemoResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def memos_create(request: Request, session=Depends(get_db_session)):
    """Create a memo. Accepts JSON, a form post, or markdown with a `title` in frontmatter."""
    req = await _read_memo_body(request)
    if isinstance(req, str):
        return error_response(request, req, 400)

    memo = await create_memo(session, req.title, req.content)
    return render_response(request, MemoResponse(**memo), status_code=201)


@router.get(
    "/api/memos/{memo_id}",
    response_model=MemoResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_read)
async def memos_show(memo_id: str, request: Request, session=Depends(get_db_session)):
    mid = parse_id(memo_id)
    if mid is None:
        return error_response(request, "Invalid ID", 400)
    memo = await get_memo(session, mid)
    if not memo:
        return error_response(request, "Memo not found", 404)
    return render_response(request, MemoResponse(**memo))


@router.put(
    "/api/memos/{memo_id}",
    response_model=MemoResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def memos_update(memo_id: str, request: Request, session=Depends(get_db_session)):
    mid = parse_id(memo_id)
    if mid is None:
        return error_response(request, "Invalid ID", 400)
    req = await _read_memo_body(request)
    if isinstance(req, str):
        return error_response(request, req, 400)

    memo = await update_memo(session, mid, req.title, req.content)
    if not memo:
        return error_response(request, "Memo not found", 404)
    return render_response(request, MemoResponse(**memo))


@router.delete(
    "/api/memos/{memo_id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def memos_delete(memo_id: str, request: Request, session=Depends(get_db_session)):
    mid = parse_id(memo_id)
    if mid is None:
        return error_response(request, "Invalid ID", 400)
    if not await delete_memo(session, mid):
        return error_response(request, "Memo not found", 404)
    return render_response(request, MessageResponse(message="Memo deleted"))
