from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ConversionRequest(BaseModel):
	"""Raw conversion body; format and positivity rules live in CurrencyService."""

	model_config = ConfigDict(
		populate_by_name=True,
		json_schema_extra={'example': {'from': 'USD', 'to': 'INR', 'amount': 100}},
	)

	from_currency: str = Field(..., alias='from', description='Source currency code')
	to_currency: str = Field(..., alias='to', description='Target currency code')
	amount: Decimal = Field(..., description='Amount in source currency units')
