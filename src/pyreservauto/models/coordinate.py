"""Coordinate model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pyreservauto.exceptions import ReservautoConfigError
from pyreservauto.ingestion.normalize import finite_float, safe_float


class Coordinate(BaseModel):
    """A WGS84 position in decimal degrees.

    Parameters
    ----------
    latitude : float
        Latitude in degrees.
    longitude : float
        Longitude in degrees.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(validation_alias=AliasChoices("latitude", "lat", "Latitude"))
    longitude: float = Field(validation_alias=AliasChoices("longitude", "lng", "lon", "Longitude"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> Any:
        parsed = safe_float(value)
        return value if parsed is None else parsed

    @classmethod
    def parse(cls, text: str) -> Coordinate:
        """Parse a ``"lat,lng"`` string such as ``"45.5,-73.6"``.

        Raises
        ------
        ReservautoConfigError
            If *text* is not two comma-separated finite numbers.
        """
        parts = [part.strip() for part in text.split(",")]
        if len(parts) != 2:
            raise ReservautoConfigError(f"Location must be 'lat,lng', got {text!r}")
        lat, lng = (finite_float(part) for part in parts)
        if lat is None or lng is None:
            raise ReservautoConfigError(f"Location must be finite numeric 'lat,lng', got {text!r}")
        return cls(latitude=lat, longitude=lng)

    def __str__(self) -> str:
        return f"{self.latitude}, {self.longitude}"
