"""DEX and stablecoin API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from topledger_client.schemas import Label, Number


class VolumePoint(BaseModel):
    """Yearly DEX volume."""

    year: Label
    volume: Number = 0.0
    cumulative_volume: Number = 0.0


class TvlVelocityPoint(BaseModel):
    """TVL and velocity for a period."""

    date: str | None = Field(alias="block_date", default=None)
    tvl: Number = Field(alias="TVL", default=0.0)
    velocity: Number = Field(alias="Velocity", default=0.0)

    model_config = ConfigDict(populate_by_name=True)


class StablecoinTvlPoint(BaseModel):
    """Stablecoin amount held in pools for a day."""

    block_date: str
    amount_in_pool: Number = Field(alias="Amount_in_Pool", default=0.0)

    model_config = ConfigDict(populate_by_name=True)
