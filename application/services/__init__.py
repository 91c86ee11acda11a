from .conversion_service import ConversionService
from .currency_service import CurrencyService
from .rate_service import RateService

__all__ = ['ConversionService', 'CurrencyService', 'RateService']
