"""User management routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request

from memopad.api.memos import parse_id
from memopad.config import settings
from memopad.content import error_response, read_model, render_response
from memopad.database import get_db_session
from memopad.models import (
    ErrorResponse,
    MessageResponse,
    UserListResponse,
    UserResponse,
    UserWriteRequest,
)
from memopad.rate_limit import limiter
from memopad.services.users import create_user, delete_user, list_users, update_user

router = APIRouter()


@router.get("/api/users", response_model=UserListResponse)
@limiter.limit(settings.rate_limit_read)
async def users_index(
    request: Request,
    session=Depends(get_db_session),
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
):
    users, total = await list_users(session, offset=offset, limit=limit)
    return render_response(request, UserListResponse(users=users, total=total))


@router.post(
    "/api/users",
    response_model=UserResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def users_create(request: Request, session=Depends(get_db_session)):
    """Add a user. Names need at least 2 characters; emails must be unique."""
    req = await read_model(request, UserWriteRequest)
    if isinstance(req, str):
        return error_response(request, req, 400)
    try:
        user = await create_user(session, req.name, req.email)
    except ValueError as e:
        return error_response(request, str(e), 409)
    return render_response(request, UserResponse(**user), status_code=201)


@router.put(
    "/api/users/{user_id}",
    response_model=UserResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.rate_limit_write)
async def users_update(user_id: str, request: Request, session=Depends(get_db_session)):
    uid = parse_id(user_id)
    if uid is None:
        return error_response(request, "Invalid ID", 400)
    req = await read_model(request, UserWriteRequest)
    if isinstance(req, str):
        return error_response(request, req, 400)
    try:
        user = await update_user(session, uid, req.name, req.email)
    except ValueError as e:
        return error_response(request, str(e), 409)
    if not user:
        return error_response(request, "User not found", 404)
    return render_response(request, UserResponse(**user))


@router.delete(
    "/api/users/{user_id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_write)
async def users_delete(user_id: str, request: Request, session=Depends(get_db_session)):
    uid = parse_id(user_id)
    if uid is None:
        return error_response(request, "Invalid ID", 400)
    if not await delete_user(session, uid):
        return error_response(request, "User not found", 404)
    return render_response(request, MessageResponse(message="User deleted"))
