"""
Unit tests for FilterContext.

Tests cover:
- Cache key format
- Account selector parsing
- Equality by cache key
- Validation errors
"""

import pytest

from arena_feed.core.exceptions import ValidationError
from arena_feed.domain.models import Environment, FilterContext, parse_account_selector


# =============================================================================
# CACHE KEY TESTS
# =============================================================================


class TestCacheKey:
    """Tests for the canonical cache key."""

    def test_all_accounts_without_wallet(self):
        """
        GIVEN all accounts on testnet with no wallet
        WHEN I read the cache key
        THEN it is "all_testnet_nowallet"
        """
        context = FilterContext(environment=Environment.TESTNET)

        assert context.cache_key == "all_testnet_nowallet"

    def test_account_and_wallet_lowercased(self):
        """
        GIVEN account 42 on mainnet with a mixed-case wallet
        WHEN I read the cache key
        THEN the wallet is lowercased in the key
        """
        context = FilterContext(
            environment=Environment.MAINNET,
            account_selector=42,
            wallet="0xABCdef",
        )

        assert context.cache_key == "42_mainnet_0xabcdef"

    def test_environment_accepts_string(self):
        """
        GIVEN an environment passed as a plain string
        WHEN I build a context
        THEN it is normalized to the enum
        """
        context = FilterContext(environment="mainnet")

        assert context.environment is Environment.MAINNET

    def test_blank_wallet_means_no_wallet(self):
        """
        GIVEN a whitespace-only wallet
        WHEN I build a context
        THEN no wallet filter is active
        """
        context = FilterContext(environment=Environment.TESTNET, wallet="   ")

        assert context.wallet is None
        assert context.cache_key.endswith("_nowallet")


# =============================================================================
# EQUALITY TESTS
# =============================================================================


class TestEquality:
    """Contexts compare by cache key."""

    def test_wallet_case_does_not_matter(self):
        """
        GIVEN two contexts differing only in wallet case
        WHEN I compare them
        THEN they are equal and hash the same
        """
        a = FilterContext(environment=Environment.TESTNET, wallet="0xAB")
        b = FilterContext(environment=Environment.TESTNET, wallet="0xab")

        assert a == b
        assert hash(a) == hash(b)

    def test_different_environment_not_equal(self):
        """
        GIVEN the same account on different environments
        WHEN I compare them
        THEN they differ
        """
        a = FilterContext(environment=Environment.TESTNET, account_selector=1)

        assert a != a.with_environment(Environment.MAINNET)

    def test_with_account_returns_new_context(self):
        """
        GIVEN an all-accounts context
        WHEN I select account "7"
        THEN a new context with integer account 7 is returned
        """
        context = FilterContext(environment=Environment.TESTNET)

        selected = context.with_account("7")

        assert selected.account_selector == 7
        assert selected.account_id == 7
        assert context.is_all_accounts


# =============================================================================
# VALIDATION TESTS
# =============================================================================


class TestValidation:
    """Tests for invalid filter input."""

    @pytest.mark.parametrize("value", [None, "", "all", "ALL", " all "])
    def test_all_account_spellings(self, value):
        assert parse_account_selector(value) == "all"

    def test_numeric_string_parsed(self):
        assert parse_account_selector("42") == 42

    @pytest.mark.parametrize("value", ["abc", "4.2", True])
    def test_invalid_account_selector(self, value):
        """
        GIVEN an account selector that is neither an id nor "all"
        WHEN I parse it
        THEN ValidationError is raised
        """
        with pytest.raises(ValidationError):
            parse_account_selector(value)

    def test_unknown_environment(self):
        """
        GIVEN an unknown environment name
        WHEN I build a context
        THEN ValidationError is raised
        """
        with pytest.raises(ValidationError) as exc_info:
            FilterContext(environment="devnet")

        assert exc_info.value.code == "VALIDATION_ERROR"
