from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

from domain.models.currency import ConversionAmounts, ConversionFees

MONEY_QUANTUM = Decimal('0.01')
RATE_QUANTUM = Decimal('0.00001')


@dataclass(frozen=True)
class FeeSchedule:
	fixed: Decimal  # source currency units
	percentage: Decimal  # fraction of the source amount


DEFAULT_FEE_SCHEDULE = FeeSchedule(fixed=Decimal('10'), percentage=Decimal('0.025'))


def _width(value: Decimal) -> int:
	"""Digits needed to write ``value`` out in full, integer and fraction parts."""
	_, digits, exponent = value.as_tuple()
	return len(digits) + abs(exponent)


def _quantize(value: Decimal, quantum: Decimal) -> Decimal:
	with localcontext() as ctx:
		ctx.prec = max(ctx.prec, value.adjusted() - quantum.as_tuple().exponent + 2)
		return value.quantize(quantum, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
	return _quantize(value, MONEY_QUANTUM)


def round_rate(value: Decimal) -> Decimal:
	return _quantize(value, RATE_QUANTUM)


def compute_conversion(
	amount: Decimal, rate: Decimal, schedule: FeeSchedule = DEFAULT_FEE_SCHEDULE
) -> ConversionAmounts:
	"""Convert ``amount`` at ``rate`` and deduct fees.

	Fees are charged in the source currency, converted at the same rate and
	subtracted from the converted gross amount. Rounding is applied to each
	output independently, never to intermediate values.
	"""
	with localcontext() as ctx:
		# intermediates stay exact however many digits the amount carries
		ctx.prec = max(
			ctx.prec,
			_width(amount) + 2 * _width(rate) + _width(schedule.fixed) + _width(schedule.percentage) + 4,
		)

		converted_amount = amount * rate
		percentage_fee = amount * schedule.percentage
		total_fees = schedule.fixed + percentage_fee
		fees_in_target = total_fees * rate
		final_amount = converted_amount - fees_in_target

	return ConversionAmounts(
		from_amount=amount,
		to_amount=round_money(converted_amount),
		fx_rate=round_rate(rate),
		fees=ConversionFees(
			fixed=round_money(schedule.fixed),
			percentage=round_money(percentage_fee),
			total=round_money(total_fees),
			total_in_target_currency=round_money(fees_in_target),
		),
		final_amount=round_money(final_amount),
	)
