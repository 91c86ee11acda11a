from .requests import ConversionRequest
from .responses import (
	ClearCacheResponse,
	ConversionResponse,
	ExchangeRateResponse,
	HealthResponse,
	ProviderProbeResponse,
	SupportedCurrenciesResponse,
)

__all__ = [
	'ClearCacheResponse',
	'ConversionRequest',
	'ConversionResponse',
	'ExchangeRateResponse',
	'HealthResponse',
	'ProviderProbeResponse',
	'SupportedCurrenciesResponse',
]
