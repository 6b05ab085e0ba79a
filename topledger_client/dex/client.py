"""DEX API client - volume, TVL/velocity, stablecoin TVL."""

from topledger_client.base import BaseClient
from topledger_client.dex.schemas import StablecoinTvlPoint, TvlVelocityPoint, VolumePoint


class DexClient(BaseClient):
    """Client for DEX and stablecoin queries."""

    def __init__(self, queries: dict[str, tuple[int, str]], **kwargs):
        super().__init__(**kwargs)
        self._queries = queries

    async def volume_by_year(self) -> list[VolumePoint]:
        """Yearly volume with cumulative total, oldest year first."""
        query_id, key = self._queries["dex_volume"]
        rows = await self.query_rows(query_id, key)
        points = [VolumePoint.model_validate(r) for r in rows]
        return sorted(points, key=lambda p: p.year)

    async def tvl_velocity(self, date_part: str = "D") -> list[TvlVelocityPoint]:
        """TVL and velocity at the given granularity (D/W/M/Q/Y)."""
        query_id, key = self._queries["tvl_velocity"]
        rows = await self.query_rows(query_id, key, parameters={"Date Part": date_part})
        points = [TvlVelocityPoint.model_validate(r) for r in rows]
        return sorted((p for p in points if p.date), key=lambda p: p.date)

    async def stablecoin_tvl(self) -> list[StablecoinTvlPoint]:
        """Stablecoin amount in pools per day, oldest first."""
        query_id, key = self._queries["stablecoin_tvl"]
        rows = await self.query_rows(query_id, key)
        points = [StablecoinTvlPoint.model_validate(r) for r in rows]
        return sorted(points, key=lambda p: p.block_date)
