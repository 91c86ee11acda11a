class CurrencyException(Exception):
    pass


class ValidationError(CurrencyException):
    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class InvalidCurrencyError(ValidationError):
    pass


class InvalidAmountError(ValidationError):
    pass


class RateUnavailableError(CurrencyException):
    def __init__(
        self,
        from_currency: str,
        to_currency: str,
        suggestion: str = 'Please try again later or contact support',
    ):
        super().__init__(f'No FX rate available for {from_currency} -> {to_currency}')
        self.from_currency = from_currency
        self.to_currency = to_currency
        self.suggestion = suggestion


class ProviderError(CurrencyException):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class CacheError(CurrencyException):
    pass
