"""Failure messages for Locust from storefront API responses.

The storefront answers failures in one of four body shapes:

- FastAPI request validation: {"detail": [{"loc": [...], "msg": "..."}]}
- Protean domain errors: {"error": "msg"} or {"error": {"field": ["msg"]}}
- HTTPException: {"detail": "msg"}
- Checkout results: {"state": "...", "notice": "...", "errors": {"field": ["msg"]}}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response

MAX_DETAIL = 300


def _field_messages(errors: dict) -> str:
    parts = []
    for field, messages in errors.items():
        if isinstance(messages, (list, tuple)):
            messages = ", ".join(str(m) for m in messages)
        parts.append(f"{field}: {messages}")
    return " | ".join(parts)


def _request_validation(detail: list) -> str:
    parts = []
    for item in detail:
        if not isinstance(item, dict):
            parts.append(str(item))
            continue
        field = ".".join(str(p) for p in item.get("loc", []) if p != "body")
        message = item.get("msg", "invalid")
        parts.append(f"{field}: {message}" if field else message)
    return " | ".join(parts)


def extract_error_detail(response: Response) -> str:
    """Summarise a failed storefront response in one line."""
    try:
        body = response.json()
    except ValueError:
        text = (getattr(response, "text", "") or "").strip()
        return text[:MAX_DETAIL] or "(empty response body)"

    if not isinstance(body, dict):
        return str(body)[:MAX_DETAIL]

    detail = body.get("detail")
    if isinstance(detail, list):
        return _request_validation(detail)
    if isinstance(detail, str):
        return detail

    error = body.get("error")
    if isinstance(error, dict):
        return _field_messages(error)
    if error:
        return str(error)

    if body.get("errors"):
        return _field_messages(body["errors"])
    if body.get("notice"):
        return f"{body.get('state', 'checkout')}: {body['notice']}"

    return str(body)[:MAX_DETAIL]
