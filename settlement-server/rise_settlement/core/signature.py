"""MD5 parameter signing used by the Basepay and NEKpay callback protocols.

The gateways sign a flat parameter set as ``k1=v1&k2=v2&...&key=<secret>``
with keys sorted ascending, ``sign``/``sign_type`` left out and absent values
dropped entirely. A single byte of difference in the canonical string breaks
every verification, so value rendering follows what the gateways emit:
integers in plain decimal, booleans lowercase, never scientific notation.
"""

from __future__ import annotations

import hashlib
import hmac
from decimal import Decimal
from typing import Any, Callable, Literal, Mapping, Optional

KeyOrder = Literal["locale", "byte"]

EXCLUDED_KEYS = frozenset({"sign", "sign_type"})


def _locale_sort_key(key: str) -> tuple:
    # Approximates ICU root collation: punctuation < digits < letters,
    # letters compared case-insensitively first, lowercase wins ties.
    primary = []
    tertiary = []
    for ch in key:
        if ch.isdigit():
            group = 1
        elif ch.isalpha():
            group = 2
        else:
            group = 0
        primary.append((group, ch.casefold()))
        tertiary.append(0 if not ch.isupper() else 1)
    return (primary, tertiary, key)


_SORT_KEYS: dict[str, Callable[[str], Any]] = {
    "locale": _locale_sort_key,
    "byte": lambda key: key.encode("utf-8"),
}


def format_value(value: Any) -> str:
    """Render a parameter value exactly as it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def canonical_string(params: Mapping[str, Any], secret: str, key_order: KeyOrder = "locale") -> str:
    try:
        sort_key = _SORT_KEYS[key_order]
    except KeyError as exc:
        raise ValueError(f"unsupported key order: {key_order}") from exc

    keys = sorted(
        (k for k, v in params.items() if k not in EXCLUDED_KEYS and v is not None),
        key=sort_key,
    )
    pairs = [f"{k}={format_value(params[k])}" for k in keys]
    pairs.append(f"key={secret}")
    return "&".join(pairs)


def sign(params: Mapping[str, Any], secret: str, key_order: KeyOrder = "locale") -> str:
    payload = canonical_string(params, secret, key_order).encode("utf-8")
    return hashlib.md5(payload).hexdigest()


def verify(
    params: Mapping[str, Any],
    received_signature: Optional[str],
    secret: str,
    key_order: KeyOrder = "locale",
) -> bool:
    if not received_signature:
        return False
    expected = sign(params, secret, key_order)
    return hmac.compare_digest(
        expected.encode("utf-8"), received_signature.strip().lower().encode("utf-8")
    )


__all__ = ["EXCLUDED_KEYS", "KeyOrder", "canonical_string", "format_value", "sign", "verify"]
