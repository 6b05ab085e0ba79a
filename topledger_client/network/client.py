"""Network API client - transaction fees, TPS, validator performance."""

from topledger_client.base import BaseClient
from topledger_client.network.schemas import TpsPoint, TxnFeesPoint, ValidatorEpoch


class NetworkClient(BaseClient):
    """Client for network usage queries."""

    def __init__(self, queries: dict[str, tuple[int, str]], research_url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self._queries = queries
        self._research_url = research_url

    async def txn_fees(self) -> list[TxnFeesPoint]:
        """Average transaction fees per day, oldest first."""
        query_id, key = self._queries["txn_fees"]
        rows = await self.query_rows(query_id, key)
        points = [TxnFeesPoint.model_validate(r) for r in rows]
        return sorted(points, key=lambda p: p.block_date)

    async def tps(self) -> list[TpsPoint]:
        """Total/success/failed/real TPS per day, oldest first."""
        query_id, key = self._queries["tps"]
        rows = await self.query_rows(query_id, key)
        points = [TpsPoint.model_validate(r) for r in rows]
        return sorted(points, key=lambda p: p.block_date)

    async def validator_performance(self, vote_account: str) -> list[ValidatorEpoch]:
        """Per-epoch stats for one vote account (research workspace)."""
        query_id, key = self._queries["validator_performance"]
        rows = await self.query_rows(
            query_id,
            key,
            parameters={"vote_account": vote_account},
            base_url=self._research_url,
        )
        points = [ValidatorEpoch.model_validate(r) for r in rows]
        return sorted(points, key=lambda p: p.epoch)
