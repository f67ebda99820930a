from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar, Union
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Coordinates(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class AmenityItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str = Field(..., description="Category label, e.g. Farmácia or Praia")
    icon: str
    distance: float = Field(..., description="Kilometres from the property")
    distanceMeters: int
    address: str
    latitude: float
    longitude: float
    rating: Optional[float] = None


class Characteristics(BaseModel):
    """Raw label/value pairs from the listing's characteristics box."""
    type: Optional[str] = None
    builtArea: Optional[float] = None
    landArea: Optional[float] = None
    privateArea: Optional[float] = None
    dimensions: Optional[str] = None
    bedroomsDetail: Optional[str] = None
    parkingSpaces: Optional[float] = None


class ExtractedProperty(BaseModel):
    title: str
    price: float
    address: str
    neighborhood: str
    type: str
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    area: float = Field(..., gt=0, description="Square metres")
    description: str
    features: List[str] = []
    images: List[str] = []
    characteristics: Characteristics = Characteristics()
    defaulted: List[str] = Field(default_factory=list, description="Fields filled with a fallback value")


class PropertyItem(ExtractedProperty):
    id: str
    url: str
    latitude: float
    longitude: float
    beachDistance: Optional[int] = Field(None, description="Metres to the nearest beach")
    amenities: List[AmenityItem] = []
    geocodeFallback: Optional[str] = None
    amenitiesFallback: Optional[str] = None


class ScrapeRequest(BaseModel):
    url: Optional[str] = None


class ScrapeResponse(BaseModel):
    success: bool = True
    data: PropertyItem


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    value: T
    reason: str

    @property
    def is_fallback(self) -> bool:
        return True


Enriched = Union[Ok[T], Fallback[T]]
