"""Shared fixtures for the SOL-X test suite."""

import logging

import pytest

from solx.lang import parse


COUNTER_SOURCE = """
program Counter

account CounterState {
  authority: Pubkey
  count: u64
}

instruction initialize(authority: Signer, state: CounterState) {
  init account state: CounterState payer authority
  state.authority = authority.key
  state.count = 0
}

instruction increment(authority: Signer, state: CounterState) {
  require state.authority == authority.key
  state.count += 1
}
"""


VAULT_SOURCE = """
program Vault

// a vault with a few of every field type
account VaultState {
  owner: Pubkey
  balance: u64
  tags: Vec<String>
  limit: Option<i32>
  locked: bool
}

account Receipt {
  amount: u64
  memo: String
}

instruction deposit(owner: Signer, vault: VaultState, receipt: Receipt, amount: u64, memo: String) {
  init account receipt: Receipt payer owner signer owner
  require !vault.locked && amount > 0, "VaultLocked"
  vault.balance = vault.balance + amount * 2 - (amount / 3) % 4
  receipt.amount = amount
  receipt.memo = memo
  vault.locked = false || -amount <= 10
  vault.balance
}

instruction lock(owner: Signer, vault: VaultState, flag: bool) {
  require vault.owner == owner.key
  vault.locked = flag
}
"""


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep SOLX_* settings and CLI logging setup from leaking between tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SOLX_"):
            monkeypatch.delenv(key)
    yield
    logger = logging.getLogger("solx")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def counter_source():
    return COUNTER_SOURCE


@pytest.fixture
def counter_program():
    return parse(COUNTER_SOURCE)


@pytest.fixture
def vault_source():
    return VAULT_SOURCE


@pytest.fixture
def vault_program():
    return parse(VAULT_SOURCE)
