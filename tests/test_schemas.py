# tests/test_schemas.py

"""
Unit tests for the request schemas: the validation stage and the
normalization stage are exercised separately, then composed.
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from catalog_service.errors import format_validation_error
from catalog_service.schemas import (
    CREATE_PRODUCT,
    PRODUCT_ID,
    PRODUCT_QUERY,
    UNSET,
    UPDATE_PRODUCT,
    NewProduct,
    ProductPatch,
    ProductQuery,
    to_cents,
)


def _details(exc_info) -> list:
    return format_validation_error(exc_info.value).details


def test_validation_stage_does_not_transform():
    validated = CREATE_PRODUCT.validate({"title": " Phone ", "description": " A phone ", "price": 10})
    assert validated.title == " Phone "
    assert validated.price == 10


def test_normalization_stage_trims_and_converts_price():
    validated = CREATE_PRODUCT.validate({"title": " Phone ", "description": " A phone ", "price": 100.5})
    assert CREATE_PRODUCT.normalize(validated) == NewProduct(
        title="Phone", description="A phone", price=Decimal("100.50")
    )


@pytest.mark.parametrize(
    "value, expected",
    [(10, Decimal("10.00")), (0.1, Decimal("0.10")), (99999999.99, Decimal("99999999.99"))],
)
def test_to_cents(value, expected):
    assert to_cents(value) == expected
    assert str(to_cents(value)) == str(expected)


def test_title_length_counts_trimmed_value():
    CREATE_PRODUCT.parse({"title": "x" * 255, "description": "d", "price": 1})
    CREATE_PRODUCT.parse({"title": "  " + "x" * 255 + "  ", "description": "d", "price": 1})
    with pytest.raises(ValidationError) as exc_info:
        CREATE_PRODUCT.parse({"title": "x" * 256, "description": "d", "price": 1})
    assert _details(exc_info) == ["title: Título deve ter no máximo 255 caracteres"]


@pytest.mark.parametrize("price", [0.001, 1.005, 12.345, float("inf"), 100_000_000])
def test_price_rejected(price):
    with pytest.raises(ValidationError):
        CREATE_PRODUCT.parse({"title": "t", "description": "d", "price": price})


@pytest.mark.parametrize("price", [1, 0.01, 19.9, 19.99, 99999999.99])
def test_price_accepted(price):
    assert CREATE_PRODUCT.parse({"title": "t", "description": "d", "price": price}).price == to_cents(price)


def test_create_reports_every_violation():
    with pytest.raises(ValidationError) as exc_info:
        CREATE_PRODUCT.parse({"title": 5, "price": -1, "color": "red"})
    assert _details(exc_info) == [
        "title: Título deve ser uma string",
        "description: Descrição é obrigatória",
        "price: Preço deve ser um valor positivo",
        "color: Campo não permitido",
    ]


def test_update_only_carries_present_fields():
    patch = UPDATE_PRODUCT.parse({"price": 100.5})
    assert patch == ProductPatch(price=Decimal("100.50"))
    assert patch.title is UNSET
    assert patch.changes() == {"price": Decimal("100.50")}
    assert not patch.is_empty()


def test_update_accepts_empty_body():
    # The "at least one field" rule belongs to the update middleware, not the schema
    patch = UPDATE_PRODUCT.parse({})
    assert patch.is_empty()
    assert patch.changes() == {}


def test_update_trims_strings():
    patch = UPDATE_PRODUCT.parse({"title": "  New  ", "description": " Desc "})
    assert patch.changes() == {"title": "New", "description": "Desc"}


@pytest.mark.parametrize("body", [{"title": None}, {"price": None}, {"title": "  "}, {"extra": 1}])
def test_update_rejects(body):
    with pytest.raises(ValidationError):
        UPDATE_PRODUCT.parse(body)


@pytest.mark.parametrize("value, expected", [("1", 1), ("42", 42), ("007", 7)])
def test_identifier_accepted(value, expected):
    assert PRODUCT_ID.parse({"id": value}) == expected


@pytest.mark.parametrize("value", ["12a", "-5", "1.5", "", " 1", "+1", "\uff11\uff12", "\u0661\u0662", "\u0967"])
def test_identifier_rejected_by_pattern(value):
    with pytest.raises(ValidationError) as exc_info:
        PRODUCT_ID.parse({"id": value})
    assert _details(exc_info) == ["id: ID deve conter apenas números"]


@pytest.mark.parametrize("value", ["0", "000"])
def test_identifier_rejected_when_not_positive(value):
    with pytest.raises(ValidationError) as exc_info:
        PRODUCT_ID.parse({"id": value})
    assert _details(exc_info) == ["id: ID deve ser um número positivo"]


def test_query_defaults():
    assert PRODUCT_QUERY.parse({}) == ProductQuery(page=1, limit=10, search=None)
    assert PRODUCT_QUERY.parse({"page": "", "limit": ""}) == ProductQuery(page=1, limit=10)


def test_query_parses_and_trims():
    query = PRODUCT_QUERY.parse({"page": "3", "limit": "100", "search": "  phone ", "utm_source": "x"})
    assert query == ProductQuery(page=3, limit=100, search="phone")


@pytest.mark.parametrize(
    "params, message",
    [
        ({"page": "0"}, "page: Página deve ser um número positivo"),
        ({"page": "-1"}, "page: Página deve ser um número positivo"),
        ({"page": "abc"}, "page: Página deve ser um número positivo"),
        ({"page": "\uff13"}, "page: Página deve ser um número positivo"),
        ({"limit": "\u0665"}, "limit: Limite deve ser entre 1 e 100"),
        ({"limit": "0"}, "limit: Limite deve ser entre 1 e 100"),
        ({"limit": "101"}, "limit: Limite deve ser entre 1 e 100"),
    ],
)
def test_query_rejected(params, message):
    with pytest.raises(ValidationError) as exc_info:
        PRODUCT_QUERY.parse(params)
    assert _details(exc_info) == [message]
