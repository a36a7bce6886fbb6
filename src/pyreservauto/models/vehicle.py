"""Vehicle models."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyreservauto.geo import distance
from pyreservauto.ingestion.normalize import finite_float, safe_str
from pyreservauto.models.coordinate import Coordinate


class FeedVehicleRecord(BaseModel):
    """A raw record from the ``GetAvailableVehicles`` feed.

    Every field is required.  Descriptive fields must be non-blank and
    the position must be finite; a record breaking either rule fails
    validation.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    brand: str = Field(validation_alias=AliasChoices("CarBrand", "brand"))
    model: str = Field(validation_alias=AliasChoices("CarModel", "model"))
    plate: str = Field(validation_alias=AliasChoices("CarPlate", "plate"))
    color: str = Field(validation_alias=AliasChoices("CarColor", "color"))
    latitude: float = Field(validation_alias=AliasChoices("Latitude", "latitude"))
    longitude: float = Field(validation_alias=AliasChoices("Longitude", "longitude"))

    @field_validator("brand", "model", "plate", "color", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError(f"expected a non-blank string, got {value!r}")
        return text

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_position(cls, value: Any) -> float:
        parsed = finite_float(value)
        if parsed is None:
            raise ValueError(f"not a finite coordinate: {value!r}")
        return parsed

    @property
    def location(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

    def to_vehicle(self, observer: Coordinate) -> Vehicle:
        """Attach the distance from *observer* to this record."""
        location = self.location
        return Vehicle(
            brand=self.brand,
            model=self.model,
            plate=self.plate,
            color=self.color,
            location=location,
            distance_m=distance(observer, location),
        )


class Vehicle(BaseModel):
    """An available vehicle and its distance from the observer.

    Rebuilt from scratch on every poll; never compared with earlier
    polls.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    brand: str = ""
    """Manufacturer (e.g. ``"Toyota"``)."""
    model: str = ""
    """Model name (e.g. ``"Prius C"``)."""
    plate: str = ""
    """License plate."""
    color: str = ""
    """Body color as reported by the feed."""
    location: Coordinate
    """Parked position."""
    distance_m: float = Field(ge=0)
    """Great-circle distance from the observer in meters."""

    @property
    def label(self) -> str:
        return f"{self.brand} {self.model}".strip()
