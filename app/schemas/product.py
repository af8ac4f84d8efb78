# app/schemas/product.py
from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, WithJsonSchema

# Prețul circulă în JSON ca număr exact; serializarea e făcută de DecimalJSONResponse
# (app/core/responses.py), aici doar documentăm tipul în OpenAPI
JsonDecimal = Annotated[Decimal, WithJsonSchema({"type": "number"})]


class ProductBase(BaseModel):
    """Câmpurile produsului; toate opționale, fără validări de conținut."""
    name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("imageUrl", "image_url"),
        serialization_alias="imageUrl",
    )
    price: Optional[JsonDecimal] = None

    model_config = ConfigDict(
        populate_by_name=True,
        # oferă exemple utile în OpenAPI
        json_schema_extra={
            "examples": [
                {
                    "name": "Pen",
                    "description": "Blue ink",
                    "imageUrl": "http://example.com/pen.png",
                    "price": 1.5,
                }
            ]
        },
    )


class ProductWrite(ProductBase):
    """
    Payload pentru create/update.

    `id` e acceptat ca să nu respingem reprezentarea completă a produsului,
    dar e ignorat: id-ul vine mereu din storage sau din path.
    """
    id: Optional[int] = None


class ProductRead(ProductBase):
    """Răspuns pentru produs."""
    id: int
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
