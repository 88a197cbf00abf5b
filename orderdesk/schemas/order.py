from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

Amount = Union[int, float, str]


def _as_text(value: Any) -> Any:
    # Storefront forms send sizes and phones as numbers as often as strings.
    if value is None or isinstance(value, str):
        return value
    return str(value)


Text = Annotated[Optional[str], BeforeValidator(_as_text)]


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[int, str]] = None
    name: Text = None
    price: Optional[Amount] = None


class CartItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    product: Optional[Product] = Field(default_factory=Product)
    quantity: Optional[Amount] = 1
    size: Text = None


class Customer(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    first_name: Text = Field(default=None, alias="firstName")
    last_name: Text = Field(default=None, alias="lastName")
    email: Text = None
    phone: Text = None
    city: Text = None
    address: Text = None


class OrderPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_id: Optional[Union[str, int]] = Field(default=None, alias="orderId")
    items: list[CartItem] = Field(default_factory=list)
    total: Optional[Amount] = None
    shipping_cost: Optional[Amount] = Field(default=None, alias="shippingCost")
    customer: Optional[Customer] = None


class OrderResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    order_id: Optional[str] = Field(default=None, serialization_alias="orderId")
    bot_link: Optional[str] = Field(default=None, serialization_alias="botLink")
    error: Optional[str] = None
