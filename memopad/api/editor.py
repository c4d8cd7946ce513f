"""Editing-engine and preview routes used by the memo editor page."""

from __future__ import annotations

from fastapi import APIRouter, Request

from memopad.config import settings
from memopad.content import error_response, read_model, render_response
from memopad.editor import EditResult, handle_key_down, handle_text_change
from memopad.models import (
    EditResponse,
    ErrorResponse,
    KeyDownRequest,
    PreviewRequest,
    PreviewResponse,
    TextChangeRequest,
)
from memopad.preview import build_document, plain_text, render_html
from memopad.rate_limit import limiter

router = APIRouter()


def _edit_response(result: EditResult) -> EditResponse:
    return EditResponse(
        text=result.text,
        selection_start=result.selection.start,
        selection_end=result.selection.end,
        handled=result.handled,
    )


@router.post(
    "/api/editor/change",
    response_model=EditResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_editor)
async def editor_change(request: Request):
    """Continue `- ` bullet lists after the control inserted a newline."""
    req = await read_model(request, TextChangeRequest)
    if isinstance(req, str):
        return error_response(request, req, 400)
    return render_response(request, _edit_response(handle_text_change(req.text, req.cursor)))


@router.post(
    "/api/editor/keydown",
    response_model=EditResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_editor)
async def editor_keydown(request: Request):
    """Indent (Tab) or outdent (Shift+Tab) the line holding the selection start."""
    req = await read_model(request, KeyDownRequest)
    if isinstance(req, str):
        return error_response(request, req, 400)
    result = handle_key_down(
        req.text, req.selection_start, req.selection_end, key=req.key, shift=req.shift
    )
    return render_response(request, _edit_response(result))


@router.post(
    "/api/preview",
    response_model=PreviewResponse,
    responses={400: {"model": ErrorResponse}},
)
@limiter.limit(settings.rate_limit_editor)
async def preview(request: Request):
    """Render markdown the way the memo preview shows it."""
    req = await read_model(request, PreviewRequest)
    if isinstance(req, str):
        return error_response(request, req, 400)
    document = build_document(req.content)
    return render_response(
        request, PreviewResponse(html=render_html(document), text=plain_text(document))
    )
