# catalog_service/schemas.py

"""
Pydantic schemas for the catalog service.

Every request schema is two explicit stages:

1. validation: a Pydantic model that only checks structure, types and ranges,
   and hands the input back unchanged;
2. normalization: a plain function turning the validated model into the
   value the operations work with (trimmed strings, integers, cents).

`Schema` glues both stages together; the validation middleware only ever
talks to `Schema` objects.
"""
import re
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

TITLE_MAX_LENGTH = 255
# NUMERIC(10, 2) column: eight integer digits at most.
PRICE_UPPER_BOUND = 100_000_000
CENTS = Decimal("0.01")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# ASCII digits only; \d also matches fullwidth and other Unicode digits
_DIGITS = re.compile(r"[0-9]+")


# -----------------------------
# Validation stage
# -----------------------------


def _check_title(value: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise PydanticCustomError("blank_string", "Value cannot be empty")
    if len(stripped) > TITLE_MAX_LENGTH:
        raise PydanticCustomError(
            "string_too_long",
            "String should have at most {max_length} characters",
            {"max_length": TITLE_MAX_LENGTH},
        )
    return value


def _check_description(value: str) -> str:
    if not value.strip():
        raise PydanticCustomError("blank_string", "Value cannot be empty")
    return value


def _check_cents(value: float) -> float:
    # str() gives the shortest repr of the float, so 100.5 -> "100.5", 999.999 -> "999.999"
    if Decimal(str(value)).as_tuple().exponent < -2:
        raise PydanticCustomError(
            "decimal_places", "Number should have at most 2 decimal places"
        )
    return value


Title = Annotated[str, AfterValidator(_check_title)]
Description = Annotated[str, AfterValidator(_check_description)]
# strict: JSON numbers only, no numeric strings and no booleans
Price = Annotated[
    float,
    Field(strict=True, gt=0, lt=PRICE_UPPER_BOUND, allow_inf_nan=False),
    AfterValidator(_check_cents),
]


# Schema for creating a new product.
# Used in POST /products. Closed: unknown fields are rejected.
class ProductCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Title = Field(..., description="Name of the product.", examples=["iPhone 15 Pro"])
    description: Description = Field(..., description="Detailed description of the product.")
    price: Price = Field(..., description="Price of the product, at most 2 decimal places.", examples=[7999.99])


# Schema for updating an existing product.
# Every field may be omitted, but a field that is sent must be valid: null is
# not accepted because the default is never validated, only explicit input is.
# Used in PUT /products/{id}.
class ProductUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Title = Field(None, description="New name of the product.")
    description: Description = Field(None, description="New description of the product.")
    price: Price = Field(None, description="New price of the product.")


class ProductIdParams(BaseModel):
    id: str = Field(..., pattern=r"^[0-9]+$")

    @field_validator("id")
    @classmethod
    def _check_positive(cls, value: str) -> str:
        if int(value) <= 0:
            raise PydanticCustomError("greater_than", "Input should be greater than 0")
        return value


# Not closed: tracking parameters and other noise are ignored.
class ProductQueryParams(BaseModel):
    page: Optional[str] = None
    limit: Optional[str] = None
    search: Optional[str] = None

    @field_validator("page")
    @classmethod
    def _check_page(cls, value: Optional[str]) -> Optional[str]:
        if value and (not _DIGITS.fullmatch(value) or int(value) <= 0):
            raise PydanticCustomError("page_range", "Page should be a positive integer")
        return value

    @field_validator("limit")
    @classmethod
    def _check_limit(cls, value: Optional[str]) -> Optional[str]:
        if value and (not _DIGITS.fullmatch(value) or not 0 < int(value) <= MAX_LIMIT):
            raise PydanticCustomError(
                "limit_range",
                "Limit should be between 1 and {max_limit}",
                {"max_limit": MAX_LIMIT},
            )
        return value


# -----------------------------
# Normalization stage
# -----------------------------


class _Unset:
    """Marker for a field that was not sent in a partial update."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class NewProduct:
    title: str
    description: str
    price: Decimal


@dataclass(frozen=True)
class ProductPatch:
    """Sparse update: only fields that are not UNSET get written."""

    title: Any = UNSET
    description: Any = UNSET
    price: Any = UNSET

    def changes(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class ProductQuery:
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: Optional[str] = None


def to_cents(value: float) -> Decimal:
    return Decimal(str(value)).quantize(CENTS)


def normalize_create(data: ProductCreate) -> NewProduct:
    return NewProduct(
        title=data.title.strip(),
        description=data.description.strip(),
        price=to_cents(data.price),
    )


def normalize_update(data: ProductUpdate) -> ProductPatch:
    sent = data.model_fields_set
    return ProductPatch(
        title=data.title.strip() if "title" in sent else UNSET,
        description=data.description.strip() if "description" in sent else UNSET,
        price=to_cents(data.price) if "price" in sent else UNSET,
    )


def normalize_id(data: ProductIdParams) -> int:
    return int(data.id)


def normalize_query(data: ProductQueryParams) -> ProductQuery:
    return ProductQuery(
        page=int(data.page) if data.page else DEFAULT_PAGE,
        limit=int(data.limit) if data.limit else DEFAULT_LIMIT,
        search=data.search.strip() if data.search is not None else None,
    )


M = TypeVar("M", bound=BaseModel)
T = TypeVar("T")


@dataclass(frozen=True)
class Schema(Generic[M, T]):
    """A validation model composed with the normalizer for its output."""

    name: str
    model: Type[M]
    normalizer: Callable[[M], T]

    def validate(self, data: Any) -> M:
        return self.model.model_validate(data)

    def normalize(self, validated: M) -> T:
        return self.normalizer(validated)

    def parse(self, data: Any) -> T:
        return self.normalize(self.validate(data))


CREATE_PRODUCT: Schema[ProductCreate, NewProduct] = Schema("create", ProductCreate, normalize_create)
UPDATE_PRODUCT: Schema[ProductUpdate, ProductPatch] = Schema("update", ProductUpdate, normalize_update)
PRODUCT_ID: Schema[ProductIdParams, int] = Schema("id", ProductIdParams, normalize_id)
PRODUCT_QUERY: Schema[ProductQueryParams, ProductQuery] = Schema("query", ProductQueryParams, normalize_query)


# -----------------------------
# Response schemas
# -----------------------------


# Schema for representing a product in API responses.
# Timestamps keep snake_case on the model and go out as camelCase.
class ProductResponse(BaseModel):
    id: int = Field(..., description="Unique identifier of the product.")
    title: str
    description: str
    price: Decimal = Field(..., description="Price with 2 decimal places, serialized as a string.")
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    error: str
    message: str
    details: Optional[List[str]] = None


class ApiStatus(BaseModel):
    status: str
    message: str
    timestamp: str
