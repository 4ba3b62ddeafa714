"""Account balances and RRSP contribution room."""

from dataclasses import dataclass

TAX_DEFERRED = "tax_deferred"  # RRSP
TAX_FREE = "tax_free"          # TFSA
UNREGISTERED = "unregistered"

ACCOUNTS = (TAX_DEFERRED, TAX_FREE, UNREGISTERED)


def _check_amount(amount: float) -> None:
    if amount < 0:
        raise ValueError(f"amount must be >= 0, got {amount}")


@dataclass
class Ledger:
    """Three account balances plus the remaining tax-deferred room (headroom).

    Balances and headroom never go negative.
    """

    tax_deferred: float = 0.0
    tax_free: float = 0.0
    unregistered: float = 0.0
    headroom: float = 0.0

    def deposit_tax_deferred(self, amount: float) -> float:
        """Deposit up to the available headroom; the excess goes to unregistered.

        Returns the amount that actually landed in the tax-deferred account.
        """
        _check_amount(amount)
        deposited = min(amount, self.headroom)
        self.tax_deferred += deposited
        self.headroom -= deposited
        self.unregistered += amount - deposited
        return deposited

    def deposit_tax_free(self, amount: float) -> None:
        _check_amount(amount)
        self.tax_free += amount

    def deposit_unregistered(self, amount: float) -> None:
        _check_amount(amount)
        self.unregistered += amount

    def add_headroom(self, amount: float) -> None:
        """Annual contribution room top-up."""
        _check_amount(amount)
        self.headroom += amount

    def withdraw(self, amount: float, order: tuple[str, ...]) -> float:
        """Draw `amount` from the accounts in `order`, emptying each before the next.

        Returns the amount actually withdrawn, which is less than `amount`
        when the accounts run dry.
        """
        _check_amount(amount)
        remaining = amount
        for account in order:
            if remaining <= 0:
                break
            balance = self.balance(account)
            taken = min(balance, remaining)
            setattr(self, account, balance - taken)
            remaining -= taken
        return amount - remaining

    def grow(self, rate: float) -> None:
        """Apply one year of return (a multiplier, 1.07 = +7%) to every balance."""
        self.tax_deferred *= rate
        self.tax_free *= rate
        self.unregistered *= rate

    def balance(self, account: str) -> float:
        if account not in ACCOUNTS:
            raise KeyError(f"unknown account: {account}")
        return getattr(self, account)

    def total(self) -> float:
        return self.tax_deferred + self.tax_free + self.unregistered
