import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_rate_cache
from api.schemas import HealthResponse
from application.utils.time import utc_now
from domain.exceptions.currency import CacheError
from infrastructure.cache.base import RateCacheStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=['health'])


@router.get(
	'/health',
	response_model=HealthResponse,
	status_code=status.HTTP_200_OK,
	summary='Service health check',
)
async def health_check(
	cache: Annotated[RateCacheStore, Depends(get_rate_cache)],
) -> HealthResponse:
	try:
		cached_pairs = await cache.size()
		state = 'healthy'
	except CacheError as e:
		logger.warning(f'Health check: rate cache unreachable: {e}')
		cached_pairs = None
		state = 'degraded'

	return HealthResponse(
		status=state,
		cache_backend=cache.backend,
		cached_pairs=cached_pairs,
		timestamp=utc_now(),
	)
