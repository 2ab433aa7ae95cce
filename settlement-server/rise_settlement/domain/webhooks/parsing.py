"""Turns a callback body into the flat string map the signature is computed over."""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib.parse import parse_qsl

from rise_settlement.core.signature import format_value

from .exceptions import WebhookValidationError


def decode_body(body: bytes, content_type: str | None) -> dict[str, Any]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise WebhookValidationError("body is not valid UTF-8") from exc

    media_type = (content_type or "").split(";")[0].strip().lower()
    looks_like_json = text.lstrip().startswith("{")
    if media_type == "application/json" or (not media_type and looks_like_json):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise WebhookValidationError("malformed JSON body") from exc
        if not isinstance(data, dict):
            raise WebhookValidationError("JSON body must be an object")
        return data

    return dict(parse_qsl(text, keep_blank_values=True))


def normalize_params(raw: Mapping[str, Any]) -> dict[str, str]:
    """Flatten to ``str -> str``; absent (``None``) values are dropped, nesting is rejected."""
    params: dict[str, str] = {}
    for key, value in raw.items():
        if value is None:
            continue
        if isinstance(value, (dict, list, tuple)):
            raise WebhookValidationError(f"field {key!r} is not a flat value")
        params[str(key)] = format_value(value)
    if not params:
        raise WebhookValidationError("empty callback")
    return params
