from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimals go out as JSON numbers; the UI does arithmetic on them.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used='json')]


class CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConversionSide(CamelModel):
	currency: str = Field(..., description='Currency code')
	amount: Money = Field(..., description='Amount in this currency')


class FeesResponse(CamelModel):
	fixed: Money = Field(..., description='Fixed fee in source currency')
	percentage: Money = Field(..., description='Percentage fee in source currency')
	total: Money = Field(..., description='Total fees in source currency')
	total_in_target_currency: Money = Field(..., description='Total fees converted at fxRate')


class ConversionDetail(CamelModel):
	from_: ConversionSide = Field(..., alias='from')
	to: ConversionSide
	fx_rate: Money = Field(..., description='Rate used, 5 decimal places')
	fees: FeesResponse
	final_amount: Money = Field(..., description='Target amount after fees')


class ConversionMetadataResponse(CamelModel):
	cache_hit: bool
	timestamp: datetime
	source: str = Field(..., description='cache, live-api or fallback-mock')


class ConversionResponse(CamelModel):
	conversion: ConversionDetail
	metadata: ConversionMetadataResponse

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'conversion': {
					'from': {'currency': 'USD', 'amount': 100},
					'to': {'currency': 'INR', 'amount': 8245.0},
					'fxRate': 82.45,
					'fees': {
						'fixed': 10.0,
						'percentage': 2.5,
						'total': 12.5,
						'totalInTargetCurrency': 1030.63,
					},
					'finalAmount': 7214.38,
				},
				'metadata': {
					'cacheHit': False,
					'timestamp': '2026-10-17T10:30:00Z',
					'source': 'live-api',
				},
			}
		}
	)


class ExchangeRateResponse(CamelModel):
	from_: str = Field(..., alias='from', description='Source currency code')
	to: str = Field(..., description='Target currency code')
	rate: Money = Field(..., description='Rate, 5 decimal places')
	timestamp: datetime
	cache_hit: bool
	source: str


class CurrencyResponse(BaseModel):
	code: str
	name: str
	symbol: str


class SupportedCurrenciesResponse(BaseModel):
	currencies: list[CurrencyResponse] = Field(description='Reference currency list')


class ClearCacheResponse(CamelModel):
	message: str
	cleared_entries: int


class ProviderProbeResponse(CamelModel):
	message: str
	api_response: dict[str, Any]
	parsed: dict[str, Any]


class HealthResponse(CamelModel):
	status: str
	cache_backend: str
	cached_pairs: int | None
	timestamp: datetime
