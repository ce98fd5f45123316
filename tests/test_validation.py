# tests/test_validation.py

"""
Tests for the request validator on a minimal app, independent from the
product routes and the database.
"""
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from catalog_service.errors import InvalidRequest, invalid_request_handler
from catalog_service.schemas import (
    CREATE_PRODUCT,
    PRODUCT_ID,
    PRODUCT_QUERY,
    UPDATE_PRODUCT,
    ProductCreate,
    Schema,
)
from catalog_service.validation import (
    RequestValidator,
    ValidatedRequest,
    ValidationTarget,
    validate_body,
    validate_query,
    validate_update,
)


@pytest.fixture
def client():
    app = FastAPI()
    app.add_exception_handler(InvalidRequest, invalid_request_handler)
    calls = []

    @app.get("/items")
    def search_items(validated: ValidatedRequest = Depends(validate_query(PRODUCT_QUERY))):
        query = validated.query
        return {"page": query.page, "limit": query.limit, "search": query.search}

    @app.post("/items/{id}")
    def replace_item(
        validated: ValidatedRequest = Depends(
            RequestValidator(ValidationTarget(params=PRODUCT_ID, body=CREATE_PRODUCT))
        ),
    ):
        calls.append(validated)
        return {"id": validated.params, "title": validated.body.title}

    @app.patch("/items/{id}")
    def patch_item(validated: ValidatedRequest = Depends(validate_update(PRODUCT_ID, UPDATE_PRODUCT))):
        calls.append(validated)
        return {"changes": sorted(validated.body.changes())}

    def broken_normalizer(data):
        raise RuntimeError("column secret_internal is missing")

    @app.put("/broken")
    def broken(
        validated: ValidatedRequest = Depends(
            validate_body(Schema("broken", ProductCreate, broken_normalizer))
        ),
    ):
        calls.append(validated)
        return {}

    with TestClient(app) as test_client:
        test_client.calls = calls
        yield test_client


def test_query_is_normalized(client):
    response = client.get("/items", params={"page": "2", "search": "  tv  ", "fbclid": "abc"})
    assert response.status_code == 200
    assert response.json() == {"page": 2, "limit": 10, "search": "tv"}


def test_query_violation(client):
    response = client.get("/items", params={"limit": "500"})
    assert response.status_code == 400
    assert response.json()["details"] == ["limit: Limite deve ser entre 1 e 100"]


def test_parts_are_replaced_with_normalized_values(client):
    response = client.post("/items/12", json={"title": "  TV ", "description": "d", "price": 1})
    assert response.status_code == 200
    assert response.json() == {"id": 12, "title": "TV"}


def test_first_failing_part_halts_the_pipeline(client):
    response = client.post("/items/x", json={"title": ""})
    assert response.status_code == 400
    assert response.json()["details"] == ["id: ID deve conter apenas números"]
    assert client.calls == []


def test_body_failure_does_not_reach_handler(client):
    response = client.post("/items/3", json={"title": "TV"})
    assert response.status_code == 400
    assert response.json()["error"] == "Dados inválidos"
    assert client.calls == []


def test_update_variant_rejects_empty_patch(client):
    response = client.patch("/items/3", json={})
    assert response.status_code == 400
    assert response.json()["error"] == "Nenhum campo para atualizar"
    assert client.calls == []


def test_update_variant_forwards_non_empty_patch(client):
    response = client.patch("/items/3", json={"description": "new"})
    assert response.status_code == 200
    assert response.json() == {"changes": ["description"]}


def test_malformed_body_is_a_general_error(client):
    response = client.post(
        "/items/3", content=b"\xff\xfe", headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json() == {
        "error": "Erro de validação",
        "message": "Corpo da requisição não é um JSON válido",
    }


def test_unexpected_failure_keeps_internal_detail_out_of_the_response(client):
    response = client.put("/broken", json={"title": "TV", "description": "d", "price": 1})
    assert response.status_code == 400
    assert response.json() == {
        "error": "Erro de validação",
        "message": "Erro desconhecido na validação",
    }
    assert "secret_internal" not in response.text
    assert client.calls == []
