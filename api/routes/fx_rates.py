import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import (
	get_conversion_service,
	get_currency_service,
	get_provider,
)
from api.schemas import (
	ClearCacheResponse,
	ConversionRequest,
	ConversionResponse,
	ExchangeRateResponse,
	ProviderProbeResponse,
	SupportedCurrenciesResponse,
)
from application.services import ConversionService, CurrencyService
from application.services.fee_calculator import round_rate
from application.utils.time import utc_now
from domain.exceptions.currency import ProviderError
from infrastructure.providers import ExchangeRateProvider

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api/fx-rates', tags=['fx-rates'])


@router.post(
	'/convert',
	response_model=ConversionResponse,
	status_code=status.HTTP_200_OK,
	summary='Convert an amount and price the transfer fees',
)
async def convert_currency(
	body: ConversionRequest,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ConversionResponse:
	result = await service.convert(body.from_currency, body.to_currency, body.amount)
	amounts = result.amounts
	return ConversionResponse.model_validate(
		{
			'conversion': {
				'from': {'currency': result.from_currency, 'amount': amounts.from_amount},
				'to': {'currency': result.to_currency, 'amount': amounts.to_amount},
				'fx_rate': amounts.fx_rate,
				'fees': {
					'fixed': amounts.fees.fixed,
					'percentage': amounts.fees.percentage,
					'total': amounts.fees.total,
					'total_in_target_currency': amounts.fees.total_in_target_currency,
				},
				'final_amount': amounts.final_amount,
			},
			'metadata': {
				'cache_hit': result.metadata.cache_hit,
				'timestamp': result.metadata.timestamp,
				'source': result.metadata.source.value,
			},
		}
	)


@router.get(
	'/rate/{from_currency}/{to_currency}',
	response_model=ExchangeRateResponse,
	status_code=status.HTTP_200_OK,
	summary='Get current exchange rate',
)
async def get_exchange_rate(
	from_currency: str,
	to_currency: str,
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ExchangeRateResponse:
	quote = await service.get_rate(from_currency, to_currency)
	return ExchangeRateResponse(
		from_=quote.from_currency,
		to=quote.to_currency,
		rate=round_rate(quote.rate),
		timestamp=utc_now(),
		cache_hit=quote.cache_hit,
		source=quote.source.value,
	)


@router.get(
	'/currencies',
	response_model=SupportedCurrenciesResponse,
	status_code=status.HTTP_200_OK,
	summary='List supported currencies',
)
async def get_supported_currencies(
	service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> SupportedCurrenciesResponse:
	currencies = service.list_supported_currencies()
	return SupportedCurrenciesResponse.model_validate(
		{'currencies': [{'code': c.code, 'name': c.name, 'symbol': c.symbol} for c in currencies]}
	)


@router.delete(
	'/cache',
	response_model=ClearCacheResponse,
	status_code=status.HTTP_200_OK,
	summary='Clear cached FX rates',
)
async def clear_rate_cache(
	service: Annotated[ConversionService, Depends(get_conversion_service)],
) -> ClearCacheResponse:
	cleared = await service.clear_cache()
	return ClearCacheResponse(message='FX rate cache cleared successfully', cleared_entries=cleared)


@router.get(
	'/test',
	response_model=ProviderProbeResponse,
	status_code=status.HTTP_200_OK,
	summary='Check connectivity to the upstream rate provider',
)
async def probe_provider(
	provider: Annotated[ExchangeRateProvider, Depends(get_provider)],
):
	try:
		probe = await provider.probe()
	except ProviderError as e:
		logger.error(f'FX API test failed: {e}')
		return JSONResponse(
			status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
			content={'error': 'FX API test failed', 'message': str(e)},
		)

	return ProviderProbeResponse(
		message='FX API test successful',
		api_response=probe['api_response'],
		parsed=probe['parsed'],
	)
