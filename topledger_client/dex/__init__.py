"""DEX API client - volume, TVL/velocity, stablecoin TVL."""

from topledger_client.dex.client import DexClient
from topledger_client.dex.schemas import StablecoinTvlPoint, TvlVelocityPoint, VolumePoint

__all__ = [
    "DexClient",
    "VolumePoint",
    "TvlVelocityPoint",
    "StablecoinTvlPoint",
]
