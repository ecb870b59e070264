"""Filter context identifying a reconciliation scope."""

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from arena_feed.core.exceptions import ValidationError
from arena_feed.domain.models.enums import Environment

ALL_ACCOUNTS = "all"

AccountSelector = Union[int, Literal["all"]]


def parse_account_selector(value: Union[int, str, None]) -> AccountSelector:
    """Normalize an account selector to an int id or "all"."""
    if value is None:
        return ALL_ACCOUNTS
    if isinstance(value, bool):
        raise ValidationError(f"Invalid account selector: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text in ("", ALL_ACCOUNTS):
        return ALL_ACCOUNTS
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Invalid account selector: {value!r}")


@dataclass(frozen=True, eq=False)
class FilterContext:
    """
    The (account, environment, wallet) tuple that scopes a reconciliation session.

    Two contexts are equal when their cache keys match, so wallets compare
    case-insensitively.
    """

    environment: Environment
    account_selector: AccountSelector = ALL_ACCOUNTS
    wallet: Optional[str] = None

    def __post_init__(self) -> None:
        try:
            environment = Environment(self.environment)
        except ValueError:
            raise ValidationError(f"Unknown environment: {self.environment!r}")
        object.__setattr__(self, "environment", environment)
        object.__setattr__(self, "account_selector", parse_account_selector(self.account_selector))
        wallet = self.wallet.strip() if self.wallet else None
        object.__setattr__(self, "wallet", wallet or None)

    @property
    def cache_key(self) -> str:
        """Canonical key used for cache lookup and context comparison."""
        account_key = ALL_ACCOUNTS if self.is_all_accounts else str(self.account_selector)
        wallet_key = self.wallet.lower() if self.wallet else "nowallet"
        return f"{account_key}_{self.environment.value}_{wallet_key}"

    @property
    def is_all_accounts(self) -> bool:
        return self.account_selector == ALL_ACCOUNTS

    @property
    def account_id(self) -> Optional[int]:
        """Account id to send upstream, or None for all accounts."""
        return None if self.is_all_accounts else self.account_selector

    def with_account(self, account_selector: Union[int, str]) -> "FilterContext":
        return replace(self, account_selector=account_selector)

    def with_environment(self, environment: Union[Environment, str]) -> "FilterContext":
        return replace(self, environment=environment)

    def with_wallet(self, wallet: Optional[str]) -> "FilterContext":
        return replace(self, wallet=wallet)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterContext):
            return NotImplemented
        return self.cache_key == other.cache_key

    def __hash__(self) -> int:
        return hash(self.cache_key)
