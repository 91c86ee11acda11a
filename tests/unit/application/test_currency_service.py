from decimal import Decimal

import pytest

from application.services.currency_service import CurrencyService
from domain.exceptions.currency import InvalidAmountError, InvalidCurrencyError, ValidationError


@pytest.fixture
def service():
    return CurrencyService()


class TestValidateConversionInput:
    def test_normalizes_codes_and_parses_amount(self, service):
        request = service.validate_conversion_input(' usd ', 'inr', '100.50')

        assert request.from_currency == 'USD'
        assert request.to_currency == 'INR'
        assert request.amount == Decimal('100.50')

    @pytest.mark.parametrize('amount', [100, 0.01, Decimal('7.5'), '42'])
    def test_accepts_positive_amounts(self, service, amount):
        request = service.validate_conversion_input('USD', 'EUR', amount)
        assert request.amount > 0

    @pytest.mark.parametrize('amount', [0, -100, '0', 'abc', '', None, True, float('nan'), float('inf')])
    def test_rejects_non_positive_or_non_numeric_amounts(self, service, amount):
        with pytest.raises(InvalidAmountError) as exc_info:
            service.validate_conversion_input('USD', 'EUR', amount)

        assert exc_info.value.field == 'amount'

    @pytest.mark.parametrize('code', ['INVALID', 'US', 'U5D', '', None, 840])
    def test_rejects_malformed_from_currency(self, service, code):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            service.validate_conversion_input(code, 'INR', 100)

        assert exc_info.value.field == 'from'

    def test_rejects_malformed_to_currency(self, service):
        with pytest.raises(InvalidCurrencyError) as exc_info:
            service.validate_conversion_input('USD', 'RUPEE', 100)

        assert exc_info.value.field == 'to'

    def test_errors_share_validation_base(self, service):
        with pytest.raises(ValidationError):
            service.validate_conversion_input('USD', 'INR', -1)


class TestSupportedCurrencies:
    def test_lists_reference_currencies(self, service):
        currencies = service.list_supported_currencies()
        codes = [c.code for c in currencies]

        assert codes == ['USD', 'EUR', 'GBP', 'INR', 'MXN', 'CAD', 'AUD', 'JPY', 'CHF', 'CNY']
        inr = next(c for c in currencies if c.code == 'INR')
        assert inr.name == 'Indian Rupee'
        assert inr.symbol == '₹'
