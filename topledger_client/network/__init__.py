"""Network API client - fees, TPS, validators."""

from topledger_client.network.client import NetworkClient
from topledger_client.network.schemas import TpsPoint, TxnFeesPoint, ValidatorEpoch

__all__ = [
    "NetworkClient",
    "TxnFeesPoint",
    "TpsPoint",
    "ValidatorEpoch",
]
