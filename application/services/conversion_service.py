from collections.abc import Callable
from datetime import datetime

from application.services.currency_service import CurrencyService
from application.services.fee_calculator import DEFAULT_FEE_SCHEDULE, FeeSchedule, compute_conversion
from application.services.rate_service import RateService
from application.utils.time import utc_now
from domain.models.currency import ConversionMetadata, ConversionResult, RateQuote


class ConversionService:
	def __init__(
		self,
		rate_service: RateService,
		currency_service: CurrencyService,
		fee_schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE,
		clock: Callable[[], datetime] = utc_now,
	):
		self.rate_service = rate_service
		self.currency_service = currency_service
		self.fee_schedule = fee_schedule
		self.clock = clock

	async def convert(self, from_currency: object, to_currency: object, amount: object) -> ConversionResult:
		request = self.currency_service.validate_conversion_input(from_currency, to_currency, amount)

		quote = await self.rate_service.get_rate(request.from_currency, request.to_currency)
		amounts = compute_conversion(request.amount, quote.rate, self.fee_schedule)

		return ConversionResult(
			from_currency=request.from_currency,
			to_currency=request.to_currency,
			amounts=amounts,
			metadata=ConversionMetadata(
				cache_hit=quote.cache_hit,
				source=quote.source,
				timestamp=self.clock(),
			),
		)

	async def get_rate(self, from_currency: object, to_currency: object) -> RateQuote:
		source, target = self.currency_service.validate_currency_pair(from_currency, to_currency)
		return await self.rate_service.get_rate(source, target)

	async def clear_cache(self) -> int:
		return await self.rate_service.clear_cache()
