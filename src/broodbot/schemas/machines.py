"""Input schemas for machine operations."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Coordinate, StockState


class NewMachineInput(BaseModel):
    """Fields a user submits when adding a machine."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=3)
    address: str = Field(min_length=5)
    city: str = Field(default="Amsterdam", min_length=2)
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    stock_state: StockState = StockState.FULL
    comment: Optional[str] = None
    photo_url: Optional[str] = None
    reported_by: Optional[str] = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)
