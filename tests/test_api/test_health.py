from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_rate_cache
from api.main import app
from domain.exceptions.currency import CacheError


@pytest.fixture
def override_cache():
    def _override(cache):
        app.dependency_overrides[get_rate_cache] = lambda: cache
        return TestClient(app)
    yield _override
    app.dependency_overrides.clear()


def test_health_reports_cache_size(override_cache, memory_cache):
    client = override_cache(memory_cache)

    response = client.get('/health')

    assert response.status_code == 200
    data = response.json()
    assert data['status'] == 'healthy'
    assert data['cacheBackend'] == 'memory'
    assert data['cachedPairs'] == 0


def test_health_degraded_when_cache_unreachable(override_cache):
    broken_cache = AsyncMock()
    broken_cache.backend = 'redis'
    broken_cache.size.side_effect = CacheError('Redis scan failed')
    client = override_cache(broken_cache)

    response = client.get('/health')

    assert response.status_code == 200
    data = response.json()
    assert data['status'] == 'degraded'
    assert data['cacheBackend'] == 'redis'
    assert data['cachedPairs'] is None
