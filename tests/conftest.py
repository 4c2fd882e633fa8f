"""Shared fixtures for chainaudit tests.

Provides small contract sources with known weaknesses at known lines.
Line numbers referenced in tests are 1-based and counted from the first
line of each source.
"""

from __future__ import annotations

import pathlib

import pytest

# Value transfer at line 13, balance written afterwards at line 15.
REENTRANT_VAULT = """\
// SPDX-License-Identifier: MIT
pragma solidity 0.8.20;

contract Vault {
    mapping(address => uint256) public balances;

    function deposit() external payable {
        balances[msg.sender] += msg.value;
    }

    function withdraw(uint256 amount) external {
        require(balances[msg.sender] >= amount, "insufficient");
        (bool ok, ) = msg.sender.call{value: amount}("");
        require(ok, "failed");
        balances[msg.sender] -= amount;
    }
}
"""

# Function without visibility at line 7.
MISSING_VISIBILITY = """\
// SPDX-License-Identifier: MIT
pragma solidity 0.8.20;

contract Registry {
    uint256 public count;

    function increment() {
        count += 1;
    }
}
"""

CLEAN_COUNTER = """\
// SPDX-License-Identifier: MIT
pragma solidity 0.8.20;

contract Counter {
    uint256 public count;

    function increment() external {
        count += 1;
    }
}
"""

# Four tx.origin checks, lines 7 to 10.
TX_ORIGIN_WALLET = """\
// SPDX-License-Identifier: MIT
pragma solidity 0.8.20;

contract Wallet {
    address public owner;

    function a() external { require(tx.origin == owner); }
    function b() external { require(tx.origin == owner); }
    function c() external { require(tx.origin == owner); }
    function d() external { require(tx.origin == owner); }
}
"""

# raw_call with value at line 13, storage write at line 14.
VYPER_VAULT = """\
# @version 0.3.10

balances: public(HashMap[address, uint256])

@external
@payable
def deposit():
    self.balances[msg.sender] += msg.value

@external
def withdraw(amount: uint256):
    assert self.balances[msg.sender] >= amount
    raw_call(msg.sender, b"", value=amount)
    self.balances[msg.sender] -= amount
"""

# Unguarded external withdraw at line 13.
CAIRO_VAULT = """\
#[starknet::contract]
mod Vault {
    use starknet::ContractAddress;
    use starknet::get_caller_address;

    #[storage]
    struct Storage {
        balances: LegacyMap<ContractAddress, u256>,
    }

    #[abi(embed_v0)]
    impl VaultImpl of super::IVault<ContractState> {
        fn withdraw(ref self: ContractState, amount: u256) {
            let caller = get_caller_address();
            self.balances.write(caller, 0);
        }
    }
}
"""


@pytest.fixture
def reentrant_vault() -> str:
    return REENTRANT_VAULT


@pytest.fixture
def missing_visibility() -> str:
    return MISSING_VISIBILITY


@pytest.fixture
def clean_counter() -> str:
    return CLEAN_COUNTER


@pytest.fixture
def tx_origin_wallet() -> str:
    return TX_ORIGIN_WALLET


@pytest.fixture
def vyper_vault() -> str:
    return VYPER_VAULT


@pytest.fixture
def cairo_vault() -> str:
    return CAIRO_VAULT


@pytest.fixture
def contract_file(tmp_path: pathlib.Path):
    """Factory writing a source string to a file in a temporary directory."""

    def write(source: str, name: str = "Contract.sol") -> pathlib.Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return write
