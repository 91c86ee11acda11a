import logging
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from redis.asyncio import Redis
from redis.exceptions import RedisError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from application.services import ConversionService, CurrencyService, RateService
from application.services.rate_service import default_strategies
from config.settings import Settings, get_settings
from infrastructure.cache.base import RateCacheStore
from infrastructure.cache.memory_cache import InMemoryRateCache
from infrastructure.cache.redis_cache import RedisRateCache
from infrastructure.providers import ExchangeRateHostProvider, ExchangeRateProvider

logger = logging.getLogger(__name__)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	redis_client: Redis | None = None
	rate_cache: RateCacheStore | None = None
	provider: ExchangeRateProvider | None = None


deps = AppDependencies()


def init_dependencies(settings: Settings | None = None) -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = settings or get_settings()

	if settings.CACHE_BACKEND == 'redis':
		deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
		deps.rate_cache = RedisRateCache(deps.redis_client)
	else:
		deps.rate_cache = InMemoryRateCache()

	deps.provider = ExchangeRateHostProvider(
		base_url=settings.EXCHANGE_RATE_API_URL,
		api_key=settings.EXCHANGE_RATE_API_KEY,
		timeout=settings.FX_API_TIMEOUT_SECONDS,
	)
	logger.info(f'Dependencies initialized (cache backend: {deps.rate_cache.backend})')


@retry(
	stop=stop_after_attempt(3),
	wait=wait_exponential(multiplier=1, min=1, max=10),
	retry=retry_if_exception_type((RedisError, ConnectionError, TimeoutError)),
	reraise=True,
)
async def _ping_redis(client: Redis) -> None:
	await client.ping()


async def bootstrap() -> None:
	"""Check external collaborators. Called after init_dependencies() at startup."""
	if deps.rate_cache is None or deps.provider is None:
		raise RuntimeError('Dependencies not initialized. Call init_dependencies() first.')

	if deps.redis_client is not None:
		await _ping_redis(deps.redis_client)
		logger.info('Redis rate cache reachable')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.provider:
		await deps.provider.close()
	if deps.redis_client:
		await deps.redis_client.aclose()

	deps.provider = None
	deps.rate_cache = None
	deps.redis_client = None
	logger.info('Cleanup complete')


def get_rate_cache() -> RateCacheStore:
	if deps.rate_cache is None:
		raise RuntimeError('Rate cache not initialized')
	return deps.rate_cache


def get_provider() -> ExchangeRateProvider:
	if deps.provider is None:
		raise RuntimeError('Rate provider not initialized')
	return deps.provider


def get_currency_service() -> CurrencyService:
	return CurrencyService()


def get_rate_service(
	cache: Annotated[RateCacheStore, Depends(get_rate_cache)],
	provider: Annotated[ExchangeRateProvider, Depends(get_provider)],
	settings: Annotated[Settings, Depends(get_settings)],
) -> RateService:
	ttl = timedelta(minutes=settings.FX_CACHE_TTL_MINUTES)
	return RateService(cache=cache, strategies=default_strategies(cache, provider, ttl))


def get_conversion_service(
	rate_service: Annotated[RateService, Depends(get_rate_service)],
	currency_service: Annotated[CurrencyService, Depends(get_currency_service)],
) -> ConversionService:
	return ConversionService(rate_service=rate_service, currency_service=currency_service)
