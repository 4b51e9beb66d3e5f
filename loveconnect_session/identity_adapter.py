from __future__ import annotations

from typing import Any, Optional

from pydantic import ValidationError

from .errors import MalformedIdentityError
from .models import Identity


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return str(value)
    return None


def identity_from_payload(data: Any) -> Identity:
    """Map a get-user response body onto Identity.

    The server names the partner's email ``pairedWith``; older payloads may
    carry ``partnerEmail`` instead. This is the only place that knows the wire
    field names.
    """
    if not isinstance(data, dict):
        raise MalformedIdentityError(f"expected an object, got {type(data).__name__}")

    uid = _str_or_none(data.get("_id")) or _str_or_none(data.get("id"))
    if not uid:
        raise MalformedIdentityError("payload has no id")

    paired_with = data.get("pairedWith")
    if paired_with is None:
        paired_with = data.get("partnerEmail")

    try:
        return Identity(
            id=uid,
            name=_str_or_none(data.get("name")),
            email=_str_or_none(data.get("email")),
            avatar=_str_or_none(data.get("avatar")),
            partner_id=_str_or_none(data.get("partnerId")),
            partner_name=_str_or_none(data.get("partnerName")),
            partner_email=_str_or_none(paired_with),
            partner_code=_str_or_none(data.get("partnerCode")),
            is_paired=data.get("isPaired"),
        )
    except ValidationError as e:
        raise MalformedIdentityError(str(e)) from e
