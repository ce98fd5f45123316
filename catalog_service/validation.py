# catalog_service/validation.py

"""
Request validation for the product routes.

`RequestValidator` is a FastAPI dependency built from a `ValidationTarget`
(which schema applies to the path params, the query string and the body).
It runs the declared schemas in order, stops at the first failure by raising
`InvalidRequest`, and otherwise returns a `ValidatedRequest` holding the
normalized value of each part. Route handlers read their input from that
object only; they never touch the raw request.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Request
from pydantic import ValidationError

from .errors import InvalidRequest, format_general_error, format_validation_error, no_fields_error
from .schemas import Schema

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationTarget:
    params: Optional[Schema] = None
    query: Optional[Schema] = None
    body: Optional[Schema] = None


@dataclass
class ValidatedRequest:
    params: Any = None
    query: Any = None
    body: Any = None


class InvalidJSONBody(ValueError):
    pass


def _is_json(request: Request) -> bool:
    media_type = request.headers.get("content-type", "").split(";")[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def _read_json(request: Request) -> Any:
    raw = await request.body()
    # An empty or non-JSON body validates like an empty object
    if not raw.strip() or not _is_json(request):
        return {}
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJSONBody("Corpo da requisição não é um JSON válido") from exc


class RequestValidator:
    """
    Validates and normalizes the request parts named by `target`.

    With `require_changes=True` (update requests) a body that normalizes to an
    empty patch is rejected as well, so an empty write never reaches the
    database.
    """

    def __init__(self, target: ValidationTarget, require_changes: bool = False):
        self.target = target
        self.require_changes = require_changes

    async def __call__(self, request: Request) -> ValidatedRequest:
        validated = ValidatedRequest()
        try:
            if self.target.params is not None:
                validated.params = self.target.params.parse(dict(request.path_params))
            if self.target.query is not None:
                validated.query = self.target.query.parse(dict(request.query_params))
            if self.target.body is not None:
                validated.body = self.target.body.parse(await _read_json(request))
        except ValidationError as exc:
            logger.info(
                f"Rejected {request.method} {request.url.path}: {exc.error_count()} validation error(s)."
            )
            raise InvalidRequest(format_validation_error(exc)) from exc
        except InvalidJSONBody as exc:
            logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
            raise InvalidRequest(format_general_error(str(exc))) from exc
        except Exception as exc:
            logger.error(
                f"Unexpected error validating {request.method} {request.url.path}: {exc}",
                exc_info=True,
            )
            raise InvalidRequest(format_general_error()) from exc

        if self.require_changes and validated.body.is_empty():
            logger.info(f"Rejected {request.method} {request.url.path}: no fields to update.")
            raise InvalidRequest(no_fields_error())

        request.state.validated = validated
        return validated


def validate_body(schema: Schema) -> RequestValidator:
    return RequestValidator(ValidationTarget(body=schema))


def validate_params(schema: Schema) -> RequestValidator:
    return RequestValidator(ValidationTarget(params=schema))


def validate_query(schema: Schema) -> RequestValidator:
    return RequestValidator(ValidationTarget(query=schema))


def validate_update(params: Schema, body: Schema) -> RequestValidator:
    return RequestValidator(ValidationTarget(params=params, body=body), require_changes=True)
