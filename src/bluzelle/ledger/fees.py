"""Gas and fee resolution for a validated transaction template."""

from __future__ import annotations

from typing import Optional

from ..errors import ConfigError
from ..spec.models import TOKEN_NAME, FeeAmount, GasInfo, TransactionFee


def resolve_fee(template: TransactionFee, gas_info: Optional[GasInfo]) -> TransactionFee:
    """
    Compute the fee to broadcast from the server's suggestion and a gas policy.

    Precedence for the amount: ``max_fee`` > ``gas * gas_price`` > the
    template's first amount. Gas is clamped to ``max_gas`` when set.

    Raises:
        ConfigError: If no gas policy is supplied
    """
    if gas_info is None:
        raise ConfigError("gas_info is required")

    gas = template.gas
    if gas_info.max_gas and gas > gas_info.max_gas:
        gas = gas_info.max_gas

    amount = template.amount[0].amount if template.amount else 0
    if gas_info.max_fee:
        amount = gas_info.max_fee
    elif gas_info.gas_price:
        amount = gas * gas_info.gas_price

    return TransactionFee(gas=gas, amount=(FeeAmount(amount=amount, denom=TOKEN_NAME),))
