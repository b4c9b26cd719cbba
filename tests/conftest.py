import json

import pytest
from eth_account import Account
from eth_utils import to_checksum_address

from deterministic.constants import (
    ADDRESSES_DIRNAME,
    CHAIN_CONFIGS_DIRNAME,
    FACTORY_PROXY,
    PREMINT_EXECUTOR_PROXY,
    UPGRADE_GATE,
)
from deterministic.params import params_filepath, signatures_filepath
from deterministic.signer import Signer

# Common constants
OPERATOR_PRIVATE_KEY = "0x" + "4c" * 32

PROXY_DEPLOYER = to_checksum_address("0x" + "aa" * 20)
FACTORY_IMPL = to_checksum_address("0x" + "bb" * 20)
FACTORY_OWNER = to_checksum_address("0x" + "cc" * 20)
PREMINTER_IMPL = to_checksum_address("0x" + "dd" * 20)
GATE_DEPLOYER = to_checksum_address("0x" + "ee" * 20)
UPGRADE_GATE_ADDRESS = to_checksum_address("0x" + "12" * 20)

PROXY_SALT = "0x" + "01" * 32
PROXY_SHIM_SALT = "0x" + "02" * 32
PROXY_CREATION_CODE = "0x6080604052348015600f57600080fd5b50"
GATE_SALT = "0x" + "03" * 32
GATE_CREATION_CODE = "0x608060405234801561001057600080fd5b50"

BASE = 8453
ZORA = 7777777
OPTIMISM = 10

PROXY_PARAMS = {
    "proxyDeployerAddress": PROXY_DEPLOYER,
    "proxySalt": PROXY_SALT,
    "proxyShimSalt": PROXY_SHIM_SALT,
    "proxyCreationCode": PROXY_CREATION_CODE,
}

GENERIC_PARAMS = {
    "creationCode": GATE_CREATION_CODE,
    "salt": GATE_SALT,
    "deployerAddress": GATE_DEPLOYER,
    "upgradeGateAddress": UPGRADE_GATE_ADDRESS,
    "proxyDeployerAddress": PROXY_DEPLOYER,
}


# Utility functions
def write_json(filepath, data):
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(json.dumps(data))
    return filepath


def read_json(filepath):
    return json.loads(filepath.read_text())


def write_chain_descriptor(root, chain_id, owner=FACTORY_OWNER, **extra):
    data = {"FACTORY_OWNER": owner, **extra}
    return write_json(root / CHAIN_CONFIGS_DIRNAME / f"{chain_id}.json", data)


def write_address_descriptor(root, chain_id, **addresses):
    return write_json(root / ADDRESSES_DIRNAME / f"{chain_id}.json", addresses)


# Fixtures
@pytest.fixture
def operator():
    return Account.from_key(OPERATOR_PRIVATE_KEY)


@pytest.fixture
def signer(operator):
    return Signer(operator)


@pytest.fixture
def root(tmp_path):
    """
    A config root with params for every proxy kind and three chains:
    base has both implementations, zora only the factory, optimism none.
    """
    write_json(params_filepath(tmp_path, FACTORY_PROXY), PROXY_PARAMS)
    write_json(params_filepath(tmp_path, PREMINT_EXECUTOR_PROXY), PROXY_PARAMS)
    write_json(params_filepath(tmp_path, UPGRADE_GATE), GENERIC_PARAMS)

    write_chain_descriptor(tmp_path, BASE)
    write_chain_descriptor(tmp_path, ZORA)
    write_chain_descriptor(tmp_path, OPTIMISM)

    write_address_descriptor(
        tmp_path, BASE, FACTORY_IMPL=FACTORY_IMPL, PREMINTER_IMPL=PREMINTER_IMPL
    )
    write_address_descriptor(tmp_path, ZORA, FACTORY_IMPL=FACTORY_IMPL)
    write_address_descriptor(tmp_path, OPTIMISM)
    return tmp_path


@pytest.fixture
def existing_signatures(root):
    """Pre-existing signatures for a chain that is not signed in tests."""
    signatures = {"1": "0x" + "ab" * 65, "999": "0x" + "cd" * 65}
    for proxy_kind in (FACTORY_PROXY, PREMINT_EXECUTOR_PROXY, UPGRADE_GATE):
        write_json(signatures_filepath(root, proxy_kind), signatures)
    return signatures
