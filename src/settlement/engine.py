"""Settlement — оркестрация buy/sell по bonding curve.

Buy:
1. cost = curve.cost_to_buy(supply, quantity)
2. cost > max_cost → SlippageExceeded
3. payment_sent < cost → InsufficientPayment
4. mint → treasury credit → record timestamp → refund излишка
   (отказ refund откатывает всё)

Buy не гейтится cooldown (кроме rate_limit_buys), но записывает timestamp:
вход запускает cooldown, и быстрый выход сразу после входа блокируется.

Sell (buyback):
1. RateLimiter gate → RateLimited (первое действие аккаунта освобождено)
2. balance_of(caller) < quantity → InsufficientBalance
3. revenue = curve.revenue_for_sell(supply, quantity);
   revenue < min_revenue → SlippageExceeded
4. burn → treasury debit → record timestamp → payout
   (отказ payout откатывает burn, debit и timestamp)

Withdraw: ADMIN-only full drain treasury (см. Treasury.drain).

Сериализация:
- Каждая операция исполняется целиком под одним RLock: "прочитать supply,
  посчитать цену, изменить supply" атомарно относительно других вызовов,
  более поздние buy видят рост цены от более ранних в порядке commit
- Все мутации staged в UndoJournal и откатываются при любой ошибке
- "now" сэмплируется один раз на операцию
"""

import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional

from loguru import logger

from src.core.contracts.validators import validate_engine_snapshot
from src.core.domain.roles import Role
from src.core.domain.snapshot import EngineSnapshot, RoleGrant
from src.core.errors import (
    InsufficientBalance,
    InsufficientPayment,
    SettlementError,
    SlippageExceeded,
)
from src.core.math.checked_arithmetic import validate_non_negative_int, validate_positive_int
from src.core.math.price_curve import PriceCurve
from src.ledger.access_control import AccessControl, InMemoryAccessControl
from src.ledger.ledger import InMemoryLedger, Ledger, validate_account
from src.ledger.payouts import PayoutChannel, RecordingPayoutChannel
from src.settlement.clock import Clock, SystemClock
from src.settlement.config import SettlementConfig
from src.settlement.journal import atomic
from src.settlement.rate_limiter import RateLimiter
from src.settlement.treasury import Treasury, WithdrawalReceipt


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class BuyReceipt:
    """Результат buy."""

    account: str
    quantity: int  # Выпущено единиц
    cost: int  # Списано в treasury
    refund: int  # Возвращено излишка оплаты

    supply_before: int
    supply_after: int
    ts: int

    # Детали
    details: str


@dataclass(frozen=True)
class SellReceipt:
    """Результат sell (buyback)."""

    account: str
    quantity: int  # Сожжено единиц
    revenue: int  # Выплачено из treasury

    supply_before: int
    supply_after: int
    ts: int

    # Детали
    details: str


# =============================================================================
# SETTLEMENT
# =============================================================================


class Settlement:
    """Settlement core: buy/sell/withdraw поверх явно переданных stores.

    Stores (ledger, access_control, rate_limiter, treasury) и payout channel
    передаются в конструктор; глобального изменяемого состояния нет.
    """

    def __init__(
        self,
        ledger: Ledger,
        access_control: AccessControl,
        treasury: Treasury,
        payouts: PayoutChannel,
        config: Optional[SettlementConfig] = None,
        rate_limiter: Optional[RateLimiter] = None,
        clock: Optional[Clock] = None,
    ):
        """
        Args:
            ledger: balance ledger (mint/burn/balance_of)
            access_control: role store (has_role)
            treasury: пул валюты
            payouts: канал исходящих переводов (refund/payout/withdrawal)
            config: параметры curve/cooldown (default SettlementConfig())
            rate_limiter: store timestamps (default: пустой, cooldown из config)
            clock: источник "now" (default SystemClock)
        """
        self.config = config or SettlementConfig()
        self.curve = PriceCurve(increment=self.config.price_increment)

        if rate_limiter is None:
            rate_limiter = RateLimiter(self.config.cooldown_seconds)
        elif rate_limiter.cooldown_seconds != self.config.cooldown_seconds:
            raise ValueError(
                f"rate_limiter cooldown {rate_limiter.cooldown_seconds}s "
                f"!= config cooldown {self.config.cooldown_seconds}s"
            )

        self.ledger = ledger
        self.access_control = access_control
        self.treasury = treasury
        self.payouts = payouts
        self.rate_limiter = rate_limiter
        self.clock = clock or SystemClock()

        self._lock = threading.RLock()

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        admin: str,
        config: Optional[SettlementConfig] = None,
        clock: Optional[Clock] = None,
        payouts: Optional[PayoutChannel] = None,
    ) -> "Settlement":
        """Новый движок с in-memory stores: supply 0, treasury 0, admin → ADMIN."""
        config = config or SettlementConfig()
        return cls(
            ledger=InMemoryLedger(),
            access_control=InMemoryAccessControl(admin),
            treasury=Treasury(),
            payouts=payouts or RecordingPayoutChannel(),
            config=config,
            rate_limiter=RateLimiter(config.cooldown_seconds),
            clock=clock,
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: EngineSnapshot,
        clock: Optional[Clock] = None,
        payouts: Optional[PayoutChannel] = None,
    ) -> "Settlement":
        """Восстановление движка из снапшота персистентного состояния."""
        config = SettlementConfig(
            price_increment=snapshot.price_increment,
            cooldown_seconds=snapshot.cooldown_seconds,
            rate_limit_buys=snapshot.rate_limit_buys,
        )
        ledger = InMemoryLedger(snapshot.balances)
        ledger.check_invariants()

        return cls(
            ledger=ledger,
            access_control=InMemoryAccessControl.from_grants(
                [(grant.account, grant.role) for grant in snapshot.roles]
            ),
            treasury=Treasury(snapshot.treasury_balance),
            payouts=payouts or RecordingPayoutChannel(),
            config=config,
            rate_limiter=RateLimiter(config.cooldown_seconds, snapshot.last_action_ts),
            clock=clock,
        )

    @classmethod
    def from_json(
        cls,
        data: Dict[str, Any],
        clock: Optional[Clock] = None,
        payouts: Optional[PayoutChannel] = None,
    ) -> "Settlement":
        """Восстановление из JSON-формы снапшота.

        Порядок:
        1. JSON Schema контракт engine_snapshot → jsonschema.ValidationError
        2. EngineSnapshot (сохранение supply) → pydantic.ValidationError
        3. from_snapshot
        """
        validate_engine_snapshot(data)
        return cls.from_snapshot(EngineSnapshot(**data), clock=clock, payouts=payouts)

    # -------------------------------------------------------------------------
    # Read-only
    # -------------------------------------------------------------------------

    @property
    def price_increment(self) -> int:
        return self.config.price_increment

    @property
    def cooldown_seconds(self) -> int:
        return self.config.cooldown_seconds

    @property
    def treasury_balance(self) -> int:
        return self.treasury.balance

    def total_supply(self) -> int:
        return self.ledger.total_supply()

    def balance_of(self, account: str) -> int:
        return self.ledger.balance_of(account)

    def cost_to_buy(self, quantity: int) -> int:
        """Quote: стоимость покупки quantity при текущем supply."""
        with self._lock:
            return self.curve.cost_to_buy(self.ledger.total_supply(), quantity)

    def revenue_for_sell(self, quantity: int) -> int:
        """Quote: выручка от продажи quantity при текущем supply."""
        with self._lock:
            return self.curve.revenue_for_sell(self.ledger.total_supply(), quantity)

    def spot_price(self) -> int:
        """Quote: цена следующей единицы."""
        with self._lock:
            return self.curve.spot_price(self.ledger.total_supply())

    # -------------------------------------------------------------------------
    # Buy
    # -------------------------------------------------------------------------

    def buy(self, caller: str, quantity: int, max_cost: int, payment_sent: int) -> BuyReceipt:
        """Покупка (mint) quantity единиц за приложенную оплату.

        Args:
            caller: покупатель
            quantity: количество единиц (> 0)
            max_cost: slippage bound, максимально допустимая стоимость
            payment_sent: приложенная оплата (излишек возвращается)

        Returns:
            BuyReceipt

        Raises:
            SlippageExceeded, InsufficientPayment, ArithmeticOverflow,
            TransferFailed (refund), RateLimited (только при rate_limit_buys)
        """
        validate_account(caller, "caller")
        validate_positive_int(quantity, "quantity")
        validate_non_negative_int(max_cost, "max_cost")
        validate_non_negative_int(payment_sent, "payment_sent")

        try:
            with atomic(self._lock, "buy") as journal:
                now = self.clock.now()

                # 0. Опциональный cooldown для buy
                if self.config.rate_limit_buys:
                    self.rate_limiter.check(caller, now)

                # 1. Цена по текущему supply
                supply_before = self.ledger.total_supply()
                cost = self.curve.cost_to_buy(supply_before, quantity)

                # 2. Slippage bound
                if cost > max_cost:
                    raise SlippageExceeded("buy", cost, max_cost)

                # 3. Достаточность оплаты
                if payment_sent < cost:
                    raise InsufficientPayment(cost, payment_sent)

                # 4. Effects
                self.ledger.mint(caller, quantity)
                journal.on_rollback(
                    f"mint {quantity} to {caller}",
                    lambda: self.ledger.burn(caller, quantity),
                )

                self.treasury.credit(cost)
                journal.on_rollback(
                    f"treasury credit {cost}",
                    lambda: self.treasury.debit(cost),
                )

                # Вход запускает cooldown для следующего sell
                previous_ts = self.rate_limiter.record(caller, now)
                journal.on_rollback(
                    f"last action of {caller}",
                    lambda: self.rate_limiter.restore(caller, previous_ts),
                )

                refund = payment_sent - cost
                if refund:
                    self.payouts.transfer(caller, refund)

                supply_after = self.ledger.total_supply()
        except SettlementError as e:
            logger.warning(f"[BUY] rejected {caller} qty={quantity}: {type(e).__name__}: {e}")
            raise

        logger.info(
            f"[BUY] {caller} qty={quantity} cost={cost} refund={refund} "
            f"supply {supply_before} → {supply_after}"
        )
        return BuyReceipt(
            account=caller,
            quantity=quantity,
            cost=cost,
            refund=refund,
            supply_before=supply_before,
            supply_after=supply_after,
            ts=now,
            details=f"Minted {quantity} to {caller} for {cost}, refunded {refund}",
        )

    # -------------------------------------------------------------------------
    # Sell
    # -------------------------------------------------------------------------

    def sell(self, caller: str, quantity: int, min_revenue: int) -> SellReceipt:
        """Продажа (burn) quantity единиц обратно по curve.

        Args:
            caller: продавец
            quantity: количество единиц (> 0)
            min_revenue: slippage bound, минимально допустимая выручка

        Returns:
            SellReceipt

        Raises:
            RateLimited, InsufficientBalance, SlippageExceeded,
            InsufficientTreasury, TransferFailed (payout)
        """
        validate_account(caller, "caller")
        validate_positive_int(quantity, "quantity")
        validate_non_negative_int(min_revenue, "min_revenue")

        try:
            with atomic(self._lock, "sell") as journal:
                now = self.clock.now()

                # 1. Cooldown gate строго до расчёта цены и мутаций
                self.rate_limiter.check(caller, now)

                # 2. Баланс продавца
                balance = self.ledger.balance_of(caller)
                if balance < quantity:
                    raise InsufficientBalance(caller, balance, quantity)

                # 3. Цена по текущему supply + slippage bound
                supply_before = self.ledger.total_supply()
                revenue = self.curve.revenue_for_sell(supply_before, quantity)
                if revenue < min_revenue:
                    raise SlippageExceeded("sell", revenue, min_revenue)

                # 4. Effects
                self.ledger.burn(caller, quantity)
                journal.on_rollback(
                    f"burn {quantity} from {caller}",
                    lambda: self.ledger.mint(caller, quantity),
                )

                self.treasury.debit(revenue)
                journal.on_rollback(
                    f"treasury debit {revenue}",
                    lambda: self.treasury.credit(revenue),
                )

                previous_ts = self.rate_limiter.record(caller, now)
                journal.on_rollback(
                    f"last action of {caller}",
                    lambda: self.rate_limiter.restore(caller, previous_ts),
                )

                self.payouts.transfer(caller, revenue)

                supply_after = self.ledger.total_supply()
        except SettlementError as e:
            logger.warning(f"[SELL] rejected {caller} qty={quantity}: {type(e).__name__}: {e}")
            raise

        logger.info(
            f"[SELL] {caller} qty={quantity} revenue={revenue} "
            f"supply {supply_before} → {supply_after}"
        )
        return SellReceipt(
            account=caller,
            quantity=quantity,
            revenue=revenue,
            supply_before=supply_before,
            supply_after=supply_after,
            ts=now,
            details=f"Burned {quantity} from {caller}, paid {revenue}",
        )

    # -------------------------------------------------------------------------
    # Treasury / roles
    # -------------------------------------------------------------------------

    def withdraw(self, caller: str) -> WithdrawalReceipt:
        """ADMIN-only: перевод всего treasury caller-у.

        Raises:
            Unauthorized, TransferFailed
        """
        validate_account(caller, "caller")

        try:
            with atomic(self._lock, "withdraw") as journal:
                return self.treasury.drain(caller, self.access_control, self.payouts, journal)
        except SettlementError as e:
            logger.warning(f"[WITHDRAW] rejected {caller}: {type(e).__name__}: {e}")
            raise

    def grant_role(self, caller: str, account: str, role: Role) -> bool:
        """ADMIN-only: выдача роли (см. InMemoryAccessControl.grant_role)."""
        with self._lock:
            granted = self.access_control.grant_role(caller, account, role)

        if granted:
            logger.info(f"[ROLE] {caller} granted {role.value} to {account}")
        return granted

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def snapshot(self) -> EngineSnapshot:
        """Снапшот персистентного состояния (консистентный под lock)."""
        with self._lock:
            return EngineSnapshot(
                ts=self.clock.now(),
                price_increment=self.config.price_increment,
                cooldown_seconds=self.config.cooldown_seconds,
                rate_limit_buys=self.config.rate_limit_buys,
                total_supply=self.ledger.total_supply(),
                balances=self.ledger.balances(),
                treasury_balance=self.treasury.balance,
                last_action_ts=self.rate_limiter.snapshot(),
                roles=[
                    RoleGrant(account=account, role=role)
                    for account, role in self.access_control.grants()
                ],
            )
