from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	# Upstream rate provider
	EXCHANGE_RATE_API_URL: str = 'https://api.exchangerate.host'
	EXCHANGE_RATE_API_KEY: str = ''
	FX_API_TIMEOUT_SECONDS: float = 10

	# Rate cache
	FX_CACHE_TTL_MINUTES: int = 15
	CACHE_BACKEND: Literal['memory', 'redis'] = 'memory'
	REDIS_URL: str = 'redis://localhost:6379'

	# Logging
	LOG_LEVEL: str = 'INFO'
	LOG_DIRECTORY: str = ''

	# Application
	APP_NAME: str = 'PayStreet FX Service'
	DEBUG: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
