# promo_engine/schemas/common_schemas.py
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, Field, PlainSerializer
from typing_extensions import Annotated

T = TypeVar("T")

# Money goes over the wire as a JSON number, not a string
_as_number = PlainSerializer(float, return_type=float, when_used="json")

NonNegativeDecimal = Annotated[Decimal, Field(ge=0), _as_number]
Money = Annotated[Decimal, _as_number]


class ResponseMessage(BaseModel, Generic[T]):
    message: str
    data: Optional[T] = None


class ListResponse(BaseModel, Generic[T]):
    message: str
    data: List[T] = []
    count: int = 0
