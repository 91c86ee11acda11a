import re
from decimal import Decimal, InvalidOperation

from domain.exceptions.currency import InvalidAmountError, InvalidCurrencyError
from domain.models.currency import ConversionRequest, SupportedCurrency

CURRENCY_CODE_PATTERN = re.compile(r'^[A-Z]{3}$')

SUPPORTED_CURRENCIES: tuple[SupportedCurrency, ...] = (
	SupportedCurrency(code='USD', name='US Dollar', symbol='$'),
	SupportedCurrency(code='EUR', name='Euro', symbol='€'),
	SupportedCurrency(code='GBP', name='British Pound', symbol='£'),
	SupportedCurrency(code='INR', name='Indian Rupee', symbol='₹'),
	SupportedCurrency(code='MXN', name='Mexican Peso', symbol='$'),
	SupportedCurrency(code='CAD', name='Canadian Dollar', symbol='$'),
	SupportedCurrency(code='AUD', name='Australian Dollar', symbol='$'),
	SupportedCurrency(code='JPY', name='Japanese Yen', symbol='¥'),
	SupportedCurrency(code='CHF', name='Swiss Franc', symbol='CHF'),
	SupportedCurrency(code='CNY', name='Chinese Yuan', symbol='¥'),
)


def normalize_currency_code(value: object, field: str) -> str:
	if not isinstance(value, str):
		raise InvalidCurrencyError(field, f'{field} currency must be a 3-letter code')

	code = value.strip().upper()
	if not CURRENCY_CODE_PATTERN.match(code):
		raise InvalidCurrencyError(field, f'{field} currency must be a 3-letter code')
	return code


def parse_amount(value: object, field: str = 'amount') -> Decimal:
	# bool is an int subclass; True must not become 1
	if value is None or isinstance(value, bool):
		raise InvalidAmountError(field, 'Amount must be a positive number')

	try:
		amount = Decimal(str(value).strip())
	except InvalidOperation as e:
		raise InvalidAmountError(field, 'Amount must be a positive number') from e

	if not amount.is_finite() or amount <= 0:
		raise InvalidAmountError(field, 'Amount must be a positive number')
	return amount


class CurrencyService:
	def __init__(self, currencies: tuple[SupportedCurrency, ...] = SUPPORTED_CURRENCIES):
		self.currencies = currencies

	def list_supported_currencies(self) -> list[SupportedCurrency]:
		return list(self.currencies)

	def validate_currency_pair(self, from_currency: object, to_currency: object) -> tuple[str, str]:
		return (
			normalize_currency_code(from_currency, 'from'),
			normalize_currency_code(to_currency, 'to'),
		)

	def validate_conversion_input(
		self, from_currency: object, to_currency: object, amount: object
	) -> ConversionRequest:
		source, target = self.validate_currency_pair(from_currency, to_currency)
		return ConversionRequest(
			from_currency=source,
			to_currency=target,
			amount=parse_amount(amount),
		)
