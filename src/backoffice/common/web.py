"""Request helpers shared by the JSON controllers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Dict, Optional

from flask import g, request, session

from ..common.partial import UNSET
from ..core.exceptions import AuthenticationError, ValidationError


def business_required(view):
    """Resolve the caller's business from the session into ``g.business_id``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        business_id = session.get("business_id")
        if not business_id:
            raise AuthenticationError("Login required")
        g.business_id = int(business_id)
        return view(*args, **kwargs)

    return wrapper


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def field(data: Dict[str, Any], name: str) -> Any:
    """``UNSET`` when the key is absent, otherwise the raw value (``None`` included)."""
    return data[name] if name in data else UNSET


def optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_enum(enum_cls, value: Any, field_name: str):
    if value is None:
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}", field=field_name)


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
