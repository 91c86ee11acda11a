import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from domain.exceptions.currency import CacheError, RateUnavailableError, ValidationError

logger = logging.getLogger(__name__)


def _validation_failed(details: list[dict]) -> JSONResponse:
	return JSONResponse(status_code=400, content={'error': 'Validation failed', 'details': details})


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(ValidationError)
	async def conversion_input_handler(request: Request, exc: ValidationError):
		return _validation_failed([{'field': exc.field, 'message': exc.message}])

	@app.exception_handler(RequestValidationError)
	async def request_validation_handler(request: Request, exc: RequestValidationError):
		details = [
			{'field': str(err['loc'][-1]) if err.get('loc') else 'body', 'message': err['msg']}
			for err in exc.errors()
		]
		return _validation_failed(details)

	@app.exception_handler(RateUnavailableError)
	async def rate_unavailable_handler(request: Request, exc: RateUnavailableError):
		logger.error(f'Rate unavailable: {exc}')
		return JSONResponse(
			status_code=503,
			content={'error': 'FX rate service unavailable', 'suggestion': exc.suggestion},
		)

	@app.exception_handler(CacheError)
	async def cache_error_handler(request: Request, exc: CacheError):
		logger.error(f'Cache error: {exc}')
		return JSONResponse(status_code=503, content={'error': 'FX rate cache unavailable'})
