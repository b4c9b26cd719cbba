"""
EIP-712 payloads understood by the DeterministicProxyDeployer contract.

The field order and field types of each struct are part of the on-chain verification
contract: reordering or retyping a field yields a valid signature over the wrong
struct hash, so these definitions must only change together with the deployer.
"""

from typing import Any, Dict, List

from eth_account.messages import encode_typed_data
from eth_typing import ChecksumAddress
from eth_utils import to_hex
from web3 import Web3

from deterministic.chains import ChainConfig
from deterministic.constants import (
    CREATE_GENERIC_CONTRACT_PRIMARY_TYPE,
    CREATE_PROXY_PRIMARY_TYPE,
    DOMAIN_NAME,
    DOMAIN_VERSION,
    UPGRADE_GATE_INITIALIZE_SIGNATURE,
)
from deterministic.params import DeterministicProxyConfig, GenericDeployConfig
from deterministic.types import ChainId

TypedData = Dict[str, Any]

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

CREATE_PROXY_TYPE = [
    {"name": "proxyShimSalt", "type": "bytes32"},
    {"name": "proxySalt", "type": "bytes32"},
    {"name": "proxyCreationCode", "type": "bytes"},
    {"name": "implementationAddress", "type": "address"},
    {"name": "owner", "type": "address"},
]

CREATE_GENERIC_CONTRACT_TYPE = [
    {"name": "salt", "type": "bytes32"},
    {"name": "creationCode", "type": "bytes"},
    {"name": "initCall", "type": "bytes"},
]

w3 = Web3()


def _domain(chain_id: ChainId, verifying_contract: ChecksumAddress) -> Dict[str, Any]:
    return {
        "name": DOMAIN_NAME,
        "version": DOMAIN_VERSION,
        "chainId": chain_id,
        "verifyingContract": verifying_contract,
    }


def _typed_data(
    primary_type: str,
    struct_type: List[Dict[str, str]],
    domain: Dict[str, Any],
    message: Dict[str, Any],
) -> TypedData:
    return {
        "types": {
            "EIP712Domain": [dict(field) for field in EIP712_DOMAIN_TYPE],
            primary_type: [dict(field) for field in struct_type],
        },
        "primaryType": primary_type,
        "domain": domain,
        # message values are laid out in struct field order
        "message": {field["name"]: message[field["name"]] for field in struct_type},
    }


def build_create_proxy_typed_data(
    config: DeterministicProxyConfig, chain_config: ChainConfig
) -> TypedData:
    """Builds the createProxy request for deploying a deterministic proxy on one chain."""
    if chain_config.implementation_address is None:
        raise ValueError(
            f"Chain config for chain id {chain_config.chain_id} has no implementation address"
        )
    message = {
        "proxyShimSalt": config.proxy_shim_salt,
        "proxySalt": config.proxy_salt,
        "proxyCreationCode": config.proxy_creation_code,
        "implementationAddress": chain_config.implementation_address,
        "owner": chain_config.owner,
    }
    return _typed_data(
        primary_type=CREATE_PROXY_PRIMARY_TYPE,
        struct_type=CREATE_PROXY_TYPE,
        domain=_domain(chain_config.chain_id, config.proxy_deployer_address),
        message=message,
    )


def build_generic_deploy_typed_data(
    config: GenericDeployConfig, chain_id: ChainId, init_call: str
) -> TypedData:
    """
    Builds the createGenericContract request. The init call is opaque to the
    deployer contract, which calls it on the freshly created contract.
    """
    message = {
        "salt": config.salt,
        "creationCode": config.creation_code,
        "initCall": init_call,
    }
    return _typed_data(
        primary_type=CREATE_GENERIC_CONTRACT_PRIMARY_TYPE,
        struct_type=CREATE_GENERIC_CONTRACT_TYPE,
        domain=_domain(chain_id, config.proxy_deployer_address),
        message=message,
    )


def encode_initialize_call(owner: ChecksumAddress) -> str:
    """Returns the hex encoded call data of `initialize(address owner)`."""
    selector = Web3.keccak(text=UPGRADE_GATE_INITIALIZE_SIGNATURE)[:4]
    arguments = w3.codec.encode(["address"], [owner])
    return to_hex(bytes(selector) + arguments)


def typed_data_digest(typed_data: TypedData) -> bytes:
    """Returns the EIP-712 hash a signer commits to for this request."""
    signable_message = encode_typed_data(full_message=typed_data)
    # EIP-191: 0x19 || version || header (domain separator) || body (struct hash)
    preimage = (
        b"\x19" + signable_message.version + signable_message.header + signable_message.body
    )
    return bytes(Web3.keccak(preimage))


def describe(typed_data: TypedData) -> List[str]:
    """Human readable lines describing a request, used for confirmation prompts."""
    domain = typed_data["domain"]
    lines = [
        f"{typed_data['primaryType']} on chain id {domain['chainId']} "
        f"(verifying contract {domain['verifyingContract']})"
    ]
    for name, value in typed_data["message"].items():
        if isinstance(value, str) and len(value) > 66:
            value = f"{value[:66]}... ({(len(value) - 2) // 2} bytes)"
        lines.append(f"\t{name}={value}")
    lines.append(f"\tdigest={to_hex(typed_data_digest(typed_data))}")
    return lines
