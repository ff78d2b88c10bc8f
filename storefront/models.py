"""
Types de la couche client.
- Product, Order: données reçues du backend (Pydantic, alias JSON `_id`, `createdAt`)
- CartItem, WishlistItem, Toast: valeurs immuables exposées par les stores
- LoginForm, RegisterForm: formulaires validés avant tout appel réseau
"""
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Accepte '2024-01-15', ISO 8601 (suffixe Z compris) ou datetime; retourne toujours un datetime UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    title: str
    description: str = ""
    price: float = Field(ge=0)
    images: List[str] = Field(default_factory=list)
    materials: str = ""
    category: str = ""
    colors: List[str] = Field(default_factory=list)
    rating: float = 0
    reviews: int = 0
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, v):
        return parse_timestamp(v)

    @property
    def image(self) -> Optional[str]:
        return self.images[0] if self.images else None


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    price: float
    quantity: int = 1
    selected_color: str = Field(default="Default", alias="selectedColor")
    image: Optional[str] = None


class Order(BaseModel):
    """Commande en lecture seule; un statut inconnu est conservé tel quel (affiché comme 'pending')."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    status: str = OrderStatus.PENDING.value
    items: List[OrderItem] = Field(default_factory=list)
    total: float = 0
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("created_at", mode="before")
    @classmethod
    def _parse_created_at(cls, v):
        return parse_timestamp(v)


class LoginForm(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterForm(BaseModel):
    first_name: str = Field(min_length=1, alias="firstName")
    last_name: str = Field(min_length=1, alias="lastName")
    email: EmailStr
    password: str = Field(min_length=6)

    model_config = ConfigDict(populate_by_name=True)


@dataclass(frozen=True)
class CartItem:
    id: str
    title: str
    price: float
    quantity: int
    color: str = "Default"
    image: Optional[str] = None

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class WishlistItem:
    id: str
    title: str
    price: float
    added_at: datetime
    category: str = ""
    image: Optional[str] = None
    description: str = ""
    materials: str = ""
    colors: tuple = ()
    rating: float = 0
    reviews: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["colors"] = list(self.colors)
        data["added_at"] = self.added_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WishlistItem":
        values = dict(data)
        values["added_at"] = parse_timestamp(values.get("added_at")) or datetime.now(timezone.utc)
        values["colors"] = tuple(values.get("colors") or ())
        return cls(**values)


class ToastType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Toast:
    id: int
    message: str
    type: str = ToastType.INFO.value
    duration: int = 4000
