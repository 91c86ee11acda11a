import asyncio
from decimal import Decimal, InvalidOperation

import httpx

from domain.exceptions.currency import ProviderError, ProviderTimeoutError


class ExchangeRateHostProvider:
	"""Spot-rate client for exchangerate.host style ``/convert`` endpoints."""

	def __init__(
		self,
		base_url: str,
		api_key: str = '',
		client: httpx.AsyncClient | None = None,
		timeout: float = 10,
	):
		self.base_url = base_url.rstrip('/')
		self.api_key = api_key
		self.timeout = timeout
		self._client = client or httpx.AsyncClient(timeout=timeout)

	@property
	def name(self) -> str:
		return 'exchangerate.host'

	async def _request(self, endpoint: str, params: dict) -> dict:
		if self.api_key:
			params['access_key'] = self.api_key
		url = f'{self.base_url}/{endpoint}'

		try:
			# httpx timeouts apply per phase; this bounds the whole exchange
			async with asyncio.timeout(self.timeout):
				response = await self._client.get(url, params=params)
				response.raise_for_status()
				data = response.json()

			if not data.get('success', False):
				info = (data.get('error') or {}).get('info', 'API returned unsuccessful response')
				raise ProviderError(f'Exchange rate API error: {info}')

			return data

		except ProviderError:
			raise
		except httpx.TimeoutException as e:
			raise ProviderTimeoutError(
				f'Exchange rate request timed out: {e.__class__.__name__}'
			) from e
		except TimeoutError as e:
			raise ProviderTimeoutError(f'Exchange rate request exceeded {self.timeout}s') from e
		except httpx.HTTPStatusError as e:
			raise ProviderError(
				f'Exchange rate HTTP error {e.response.status_code}: {e.response.text[:200]}'
			) from e
		except httpx.RequestError as e:
			raise ProviderError(f'Exchange rate request failed: {e.__class__.__name__}') from e
		except Exception as e:
			raise ProviderError(f'Exchange rate response parsing error: {str(e)}') from e

	async def fetch_rate(self, from_currency: str, to_currency: str) -> Decimal:
		data = await self._request('convert', {'from': from_currency, 'to': to_currency, 'amount': 1})
		try:
			rate = Decimal(str(data['info']['rate']))
		except (KeyError, TypeError, InvalidOperation) as e:
			raise ProviderError(f'Missing rate for {from_currency} -> {to_currency}') from e

		if not rate.is_finite() or rate <= 0:
			raise ProviderError(f'Invalid rate {rate} for {from_currency} -> {to_currency}')
		return rate

	async def probe(self) -> dict:
		data = await self._request('convert', {'from': 'USD', 'to': 'INR', 'amount': 100})
		info = data.get('info') or {}
		return {
			'api_response': data,
			'parsed': {
				'success': data.get('success'),
				'rate': info.get('rate'),
				'result': data.get('result'),
				'query': data.get('query'),
			},
		}

	async def close(self) -> None:
		await self._client.aclose()
