"""Network API schemas - fees, TPS, validators."""

from pydantic import BaseModel, ConfigDict, Field

from topledger_client.schemas import Number


class TxnFeesPoint(BaseModel):
    """Average transaction fee for a day."""

    block_date: str
    average_fees: Number = Field(alias="Average_Transaction_Fees", default=0.0)

    model_config = ConfigDict(populate_by_name=True)


class TpsPoint(BaseModel):
    """Transactions per second for a day."""

    block_date: str
    total_tps: Number = Field(alias="Total_TPS", default=0.0)
    success_tps: Number = Field(alias="Success_TPS", default=0.0)
    failed_tps: Number = Field(alias="Failed_TPS", default=0.0)
    real_tps: Number = Field(alias="Real_TPS", default=0.0)

    model_config = ConfigDict(populate_by_name=True)


class ValidatorEpoch(BaseModel):
    """Validator performance for one epoch; extra columns are kept."""

    epoch: int

    model_config = ConfigDict(extra="allow")
