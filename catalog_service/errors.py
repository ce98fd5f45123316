# catalog_service/errors.py

"""
Uniform JSON error shape for the catalog service.

Every error response is `{"error": ..., "message": ..., "details": [...]}`,
where `error` is a stable category label and `details` only appears for
field-level validation failures.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .schemas import ErrorResponse

logger = logging.getLogger(__name__)

# Category labels. Clients match on these, keep them stable.
INVALID_DATA = "Dados inválidos"
VALIDATION_ERROR = "Erro de validação"
NO_FIELDS_TO_UPDATE = "Nenhum campo para atualizar"
PRODUCT_NOT_FOUND = "Produto não encontrado"
INTERNAL_ERROR = "Erro interno do servidor"

_FIELD_LABELS = {
    "title": ("Título", "m"),
    "description": ("Descrição", "f"),
    "price": ("Preço", "m"),
    "id": ("ID", "m"),
    "page": ("Página", "f"),
    "limit": ("Limite", "m"),
    "search": ("Busca", "f"),
}

# (field, pydantic error type) -> message; "*" matches any field.
_MESSAGES: Dict[Tuple[str, str], str] = {
    ("title", "string_too_long"): "Título deve ter no máximo 255 caracteres",
    ("price", "float_type"): "Preço deve ser um número",
    ("price", "float_parsing"): "Preço deve ser um número",
    ("price", "finite_number"): "Preço deve ser um número finito",
    ("price", "greater_than"): "Preço deve ser um valor positivo",
    ("price", "less_than"): "Preço deve ser menor que 100000000",
    ("price", "decimal_places"): "Preço deve ter no máximo 2 casas decimais",
    ("id", "string_pattern_mismatch"): "ID deve conter apenas números",
    ("id", "greater_than"): "ID deve ser um número positivo",
    ("page", "page_range"): "Página deve ser um número positivo",
    ("limit", "limit_range"): "Limite deve ser entre 1 e 100",
    ("*", "extra_forbidden"): "Campo não permitido",
    ("*", "model_type"): "Os dados devem ser um objeto",
    ("*", "model_attributes_type"): "Os dados devem ser um objeto",
}


class InvalidRequest(Exception):
    """Raised by the validation middleware to halt a request with a 400."""

    def __init__(self, payload: ErrorResponse):
        super().__init__(payload.message)
        self.payload = payload


def _describe(field: str, error_type: str, fallback: str) -> str:
    message = _MESSAGES.get((field, error_type)) or _MESSAGES.get(("*", error_type))
    if message:
        return message
    label, gender = _FIELD_LABELS.get(field, (None, None))
    if label is None:
        return fallback
    if error_type == "missing":
        return f"{label} é {'obrigatória' if gender == 'f' else 'obrigatório'}"
    if error_type == "string_type":
        return f"{label} deve ser uma string"
    if error_type == "blank_string":
        return f"{label} não pode estar {'vazia' if gender == 'f' else 'vazio'}"
    return fallback


def format_validation_error(exc: ValidationError) -> ErrorResponse:
    """One message per violated rule, prefixed with the field path when there is one."""
    details: List[str] = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        message = _describe(loc[-1] if loc else "", err["type"], err["msg"])
        path = f"{'.'.join(loc)}: " if loc else ""
        details.append(f"{path}{message}")
    return ErrorResponse(
        error=INVALID_DATA,
        message="Os dados fornecidos não são válidos",
        details=details,
    )


def format_general_error(message: Optional[str] = None) -> ErrorResponse:
    """Single-message validation error; without a message the text stays generic."""
    return ErrorResponse(
        error=VALIDATION_ERROR,
        message=message or "Erro desconhecido na validação",
    )


def no_fields_error() -> ErrorResponse:
    return ErrorResponse(
        error=NO_FIELDS_TO_UPDATE,
        message="Pelo menos um campo deve ser fornecido para atualização",
    )


def error_response(
    status_code: int, error: str, message: str, details: Optional[List[str]] = None
) -> JSONResponse:
    return render(status_code, ErrorResponse(error=error, message=message, details=details))


def render(status_code: int, payload: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def not_found(product_id: int) -> JSONResponse:
    return error_response(
        status.HTTP_404_NOT_FOUND,
        PRODUCT_NOT_FOUND,
        f"Produto com ID {product_id} não foi encontrado",
    )


def internal_error(message: str) -> JSONResponse:
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR, message)


# Documented error responses, shared by the route declarations.
ERROR_RESPONSES: Dict[Any, Dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid request data"},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Product not found"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Internal server error"},
}


async def invalid_request_handler(request: Request, exc: InvalidRequest) -> JSONResponse:
    return render(status.HTTP_400_BAD_REQUEST, exc.payload)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc
    )
    return internal_error("Ocorreu um erro inesperado")
