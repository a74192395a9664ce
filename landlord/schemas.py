"""
Data transfer objects handed to the controller/UI layer.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from landlord.player import PlayerColor


class PlayerRef(BaseModel):
    """Identity of a player: id, display name and token color."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    color: PlayerColor

    @field_validator("id", "name")
    @classmethod
    def no_separators(cls, value: str) -> str:
        # Identity fields are written verbatim into comma-separated save rows.
        if "," in value or "\n" in value or value.strip() != value or value.startswith("#"):
            raise ValueError(f"Invalid value for a player field: {value!r}")
        return value

    @classmethod
    def of(cls, number: int, color: PlayerColor, name: str) -> "PlayerRef":
        """Player reference with the conventional ``P<number>`` id."""
        return cls(id=f"P{number}", name=name, color=color)


class OwnableCore(BaseModel):
    """Fields shared by every ownable square."""

    model_config = ConfigDict(frozen=True)

    owner: Optional[PlayerRef] = None
    name: str
    board_index: int = Field(ge=0)
    price: int = Field(ge=0)
    sell_value: int = Field(ge=0)


class StreetInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    core: OwnableCore
    rent: int = Field(ge=0)
    houses: int = Field(ge=0)
    has_hotel: bool = False

    @model_validator(mode="after")
    def hotel_needs_house(self) -> "StreetInfo":
        if self.has_hotel and self.houses < 1:
            raise ValueError("A hotel requires at least one house")
        return self


class CompanyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    core: OwnableCore
    multiplier: int = Field(gt=0)


class DiceData(BaseModel):
    model_config = ConfigDict(frozen=True)

    d1: int = Field(ge=1, le=6)
    d2: int = Field(ge=1, le=6)
    is_double: bool
