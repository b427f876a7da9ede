"""
Rebalance Strategy — Выбор направления и объёма swap

Правило (два ветвления):
- base в избытке → BASE_TO_QUOTE, swap_amount = base - target_base
- иначе → QUOTE_TO_BASE, swap_amount = quote - target_quote

Источник swap — актив с большим избытком относительно target.
Если оба актива в дефиците, план вырожденный: QUOTE_TO_BASE с нулевым
swap_amount (no-op), без исключения.

Precondition: вызывающий код уже определил, что позиция вне диапазона.
"""

from decimal import Decimal
from typing import Union

from src.core.domain.plan import RebalancePlan, SwapDirection
from src.core.domain.pool import PoolSnapshot
from src.core.domain.position import Position
from src.core.domain.results import WithdrawResult

# Снапшот пула и результат withdraw несут одинаковые поля base/quote
Amounts = Union[PoolSnapshot, WithdrawResult]


def compute_plan(amounts: Amounts, position: Position) -> RebalancePlan:
    """
    Построение плана ребалансировки.

    Args:
        amounts: Текущие (выведенные) количества base/quote
        position: Целевая позиция

    Returns:
        RebalancePlan с направлением и входным количеством swap
        (resulting_* ещё не заполнены)
    """
    base_surplus = amounts.base_amount - position.target_base_amount
    quote_surplus = amounts.quote_amount - position.target_quote_amount

    if base_surplus > 0 and base_surplus >= quote_surplus:
        return RebalancePlan(
            direction=SwapDirection.BASE_TO_QUOTE,
            swap_amount=base_surplus,
        )

    # Quote в избытке (или равенство / оба в дефиците → no-op swap)
    return RebalancePlan(
        direction=SwapDirection.QUOTE_TO_BASE,
        swap_amount=max(quote_surplus, Decimal("0")),
    )


def settle_plan(plan: RebalancePlan, amounts: Amounts, output_amount: Decimal) -> RebalancePlan:
    """
    Заполнение итоговых количеств для deposit после исполнения swap.

    BASE_TO_QUOTE: base = base - swap_amount (= target), quote = quote + output
    QUOTE_TO_BASE: base = base + output, quote = quote - swap_amount (= target)

    Args:
        plan: План из compute_plan
        amounts: Количества до swap (результат withdraw)
        output_amount: Фактически полученное количество после swap

    Returns:
        Новый RebalancePlan с заполненными resulting_* полями

    Raises:
        ValueError: Если output_amount отрицательный
    """
    if output_amount < 0:
        raise ValueError(f"swap output must be non-negative, got {output_amount}")

    if plan.direction == SwapDirection.BASE_TO_QUOTE:
        resulting_base = amounts.base_amount - plan.swap_amount
        resulting_quote = amounts.quote_amount + output_amount
    else:
        resulting_base = amounts.base_amount + output_amount
        resulting_quote = amounts.quote_amount - plan.swap_amount

    return plan.model_copy(
        update={
            "resulting_base_amount": resulting_base,
            "resulting_quote_amount": resulting_quote,
        }
    )
