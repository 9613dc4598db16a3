"""
Settlement Errors — таксономия отказов

Все ошибки fail-closed: операция отклоняется целиком, частичных изменений
состояния нет. Внутренних retry нет, повтор (например, с другим
slippage bound) остаётся на стороне вызывающего.

Иерархия:
    SettlementError
    ├── SlippageExceeded
    ├── InsufficientPayment
    ├── InsufficientBalance
    ├── RateLimited
    ├── Unauthorized
    ├── TransferFailed
    ├── InsufficientTreasury
    └── CurveArithmeticError
        ├── ArithmeticOverflow
        └── ArithmeticUnderflow
"""


class SettlementError(Exception):
    """Базовая ошибка settlement core."""

    pass


class SlippageExceeded(SettlementError):
    """
    Цена ушла за caller-supplied bound между quote и исполнением.

    Для buy: cost > max_cost. Для sell: revenue < min_revenue.
    """

    def __init__(self, side: str, quoted: int, bound: int):
        self.side = side
        self.quoted = quoted
        self.bound = bound
        if side == "buy":
            msg = f"Slippage exceeded on buy: cost={quoted} > max_cost={bound}"
        else:
            msg = f"Slippage exceeded on sell: revenue={quoted} < min_revenue={bound}"
        super().__init__(msg)


class InsufficientPayment(SettlementError):
    """Приложенная оплата меньше вычисленной стоимости."""

    def __init__(self, cost: int, payment_sent: int):
        self.cost = cost
        self.payment_sent = payment_sent
        super().__init__(
            f"Insufficient payment: payment_sent={payment_sent} < cost={cost}"
        )


class InsufficientBalance(SettlementError):
    """У продавца меньше единиц, чем запрошено к продаже."""

    def __init__(self, account: str, balance: int, quantity: int):
        self.account = account
        self.balance = balance
        self.quantity = quantity
        super().__init__(
            f"Insufficient balance for {account!r}: balance={balance} < quantity={quantity}"
        )


class RateLimited(SettlementError):
    """Cooldown с последнего rate-limited действия аккаунта ещё не истёк."""

    def __init__(self, account: str, last_action_ts: int, now: int, retry_at: int):
        self.account = account
        self.last_action_ts = last_action_ts
        self.now = now
        self.retry_at = retry_at
        super().__init__(
            f"Rate limited: {account!r} last acted at {last_action_ts}, "
            f"now={now}, allowed from {retry_at}"
        )


class Unauthorized(SettlementError):
    """Привилегированная операция от аккаунта без нужной роли."""

    def __init__(self, account: str, role: str):
        self.account = account
        self.role = role
        super().__init__(f"Unauthorized: {account!r} does not hold role {role!r}")


class TransferFailed(SettlementError):
    """Не удалось доставить валюту получателю (refund, payout, withdrawal)."""

    def __init__(self, recipient: str, amount: int, reason: str = ""):
        self.recipient = recipient
        self.amount = amount
        self.reason = reason
        suffix = f": {reason}" if reason else ""
        super().__init__(f"Transfer of {amount} to {recipient!r} failed{suffix}")


class InsufficientTreasury(SettlementError):
    """Баланс treasury не покрывает выплату."""

    def __init__(self, balance: int, amount: int):
        self.balance = balance
        self.amount = amount
        super().__init__(
            f"Insufficient treasury: balance={balance} < requested payout={amount}"
        )


class CurveArithmeticError(SettlementError):
    """Вычисление вышло за допустимый диапазон uint256."""

    pass


class ArithmeticOverflow(CurveArithmeticError):
    """Результат или промежуточное значение > UINT256_MAX."""

    pass


class ArithmeticUnderflow(CurveArithmeticError):
    """Результат или промежуточное значение < 0."""

    pass
