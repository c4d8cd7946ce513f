"""Content negotiation: accept JSON, form posts or markdown (with YAML frontmatter)."""

from __future__ import annotations

import json
from urllib.parse import parse_qsl

import frontmatter
import yaml
from fastapi import Request, Response
from pydantic import BaseModel, ValidationError


async def parse_body(request: Request) -> dict:
    """Parse request body as JSON, urlencoded form, or markdown with YAML frontmatter."""
    content_type = request.headers.get("content-type", "")
    raw = await request.body()
    text = raw.decode("utf-8")

    if not text.strip():
        return {}

    if "application/json" in content_type:
        return json.loads(text)

    if "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(text, keep_blank_values=True))

    # Try JSON first (some clients send JSON without content-type),
    # but only if it looks like JSON and content-type isn't explicitly markdown
    stripped = text.strip()
    if stripped.startswith("{") and "text/markdown" not in content_type:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass

    # Markdown memo: structured fields in frontmatter, the document is the content
    post = frontmatter.loads(stripped)
    result = dict(post.metadata)
    if post.content.strip():
        result["content"] = post.content
    return result


def wants_json(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "application/json" in accept


def render_response(
    request: Request,
    data: dict | BaseModel,
    status_code: int = 200,
    headers: dict | None = None,
) -> Response:
    """Return JSON or markdown based on Accept header."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")

    if wants_json(request):
        return Response(
            content=json.dumps(data, indent=2, ensure_ascii=False),
            status_code=status_code,
            media_type="application/json",
            headers=headers,
        )

    # Copy before mutating so callers' dicts are not affected
    data = dict(data)

    body_key = None
    for k in ("content", "text", "message"):
        if isinstance(data.get(k), str):
            body_key = k
            break

    if body_key:
        body = data.pop(body_key)
        if data:
            content = frontmatter.dumps(frontmatter.Post(body, **data))
        else:
            content = body
    else:
        content = frontmatter.dumps(frontmatter.Post("", **data))

    return Response(
        content=content,
        status_code=status_code,
        media_type="text/markdown",
        headers=headers,
    )


def error_response(request: Request, message: str, status_code: int) -> Response:
    return render_response(request, {"error": message}, status_code=status_code)


async def read_model(request: Request, model: type[BaseModel]) -> BaseModel | str:
    """Parse and validate the body into ``model``, or return the error message."""
    try:
        body = await parse_body(request)
    except (yaml.YAMLError, ValueError):
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        return "Invalid request body"
    if not isinstance(body, dict):
        return "Invalid request body"
    try:
        return model(**body)
    except ValidationError as e:
        errors = e.errors()
        msg = errors[0].get("msg", "Invalid request body") if errors else "Invalid request body"
        return msg.removeprefix("Value error, ")
