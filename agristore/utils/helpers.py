import dataclasses
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from flask import request
from flask.json.provider import DefaultJSONProvider

from agristore.models.entities import to_datetime
from agristore.utils.exceptions import BadRequestError, ValidationError


class StoreJSONProvider(DefaultJSONProvider):
    """JSON with ISO dates, numeric money and fields kept in declaration order."""
    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        return DefaultJSONProvider.default(o)


def get_json_body() -> dict:
    """The request body as a dict; anything else is a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return data


def query_datetime(name: str) -> Optional[datetime]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return to_datetime(raw.strip())
    except ValueError:
        raise ValidationError(errors=[{"field": name, "message": f"{name} must be an ISO-8601 date-time"}])


def query_date(name: str) -> Optional[date]:
    value = query_datetime(name)
    return value.date() if value else None
