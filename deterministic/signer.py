from enum import Enum
from pathlib import Path
from typing import List, NamedTuple, Optional

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from eth_utils import to_hex

from deterministic.chains import ChainConfigResolver, ConfigNotFound
from deterministic.confirm import _confirm_signing, _continue
from deterministic.constants import (
    IMPLEMENTATION_ADDRESS_KEYS,
    SIGNATURE_SIZE,
    SUPPORTED_PROXY_KINDS,
    UPGRADE_GATE,
)
from deterministic.params import load_deployment_config, signatures_filepath
from deterministic.signatures import SignatureStore
from deterministic.typed_data import (
    TypedData,
    build_create_proxy_typed_data,
    build_generic_deploy_typed_data,
    describe,
    encode_initialize_call,
)
from deterministic.types import ChainId, ProxyKind


class SigningBackendError(Exception):
    """Raised when the signing backend fails to produce a signature"""


class Signer:
    """Signs EIP-712 requests with a local operator key."""

    def __init__(self, account: LocalAccount):
        self._account = account

    @classmethod
    def from_private_key(cls, private_key: str) -> "Signer":
        try:
            account = Account.from_key(private_key)
        except Exception as e:
            # never echo the key itself
            raise ValueError(f"Invalid signer private key ({type(e).__name__})") from None
        return cls(account)

    @property
    def address(self) -> ChecksumAddress:
        return self._account.address

    def sign_typed_data(self, typed_data: TypedData) -> str:
        """Returns the 0x-prefixed signature (r, s, v) of a typed data request."""
        try:
            signable_message = encode_typed_data(full_message=typed_data)
            signed_message = self._account.sign_message(signable_message)
        except Exception as e:
            raise SigningBackendError(
                f"Failed to sign {typed_data.get('primaryType')} request: {e}"
            ) from e

        signature = bytes(signed_message.signature)
        if len(signature) != SIGNATURE_SIZE:
            raise SigningBackendError(
                f"Expected a {SIGNATURE_SIZE} byte signature, got {len(signature)} bytes"
            )
        return to_hex(signature)


class FlowOutcome(Enum):
    SIGNED = "signed"
    SKIPPED = "skipped"


class FlowResult(NamedTuple):
    proxy_kind: ProxyKind
    chain_id: ChainId
    outcome: FlowOutcome
    signature: Optional[str] = None
    reason: Optional[str] = None


class DeploymentSigner:
    """
    Signs the deterministic deployments of every proxy kind for one chain id.

    Flows run in a fixed order: factory proxy, premint executor proxy, upgrade gate.
    A proxy whose implementation is not deployed on the chain is skipped, while a
    chain without an upgrade gate config aborts the run. Any other error aborts
    the run as well, leaving stores that were already written in place.
    """

    def __init__(self, signer: Signer, root: Path, interactive: bool = False):
        self.signer = signer
        self.root = Path(root)
        self.resolver = ChainConfigResolver(self.root)
        self.interactive = interactive

    def sign_proxy(self, proxy_kind: ProxyKind, chain_id: ChainId) -> FlowResult:
        """Signs the createProxy request of a factory or premint executor proxy."""
        if proxy_kind not in IMPLEMENTATION_ADDRESS_KEYS:
            raise ValueError(f"'{proxy_kind}' is not deployed with createProxy")

        chain_configs = self.resolver.resolve(proxy_kind)
        try:
            chain_config = chain_configs.lookup(chain_id)
        except ConfigNotFound as e:
            print(f"(i) Skipping {proxy_kind}: {e}")
            return FlowResult(proxy_kind, chain_id, FlowOutcome.SKIPPED, reason=str(e))

        config = load_deployment_config(self.root, proxy_kind)
        typed_data = build_create_proxy_typed_data(config=config, chain_config=chain_config)
        return self._sign_and_save(proxy_kind, chain_id, typed_data)

    def sign_upgrade_gate(self, chain_id: ChainId) -> FlowResult:
        """Signs the createGenericContract request deploying the upgrade gate."""
        chain_configs = self.resolver.resolve(UPGRADE_GATE)
        chain_config = chain_configs.lookup(chain_id)

        config = load_deployment_config(self.root, UPGRADE_GATE)
        init_call = encode_initialize_call(chain_config.owner)
        typed_data = build_generic_deploy_typed_data(
            config=config, chain_id=chain_config.chain_id, init_call=init_call
        )
        return self._sign_and_save(UPGRADE_GATE, chain_id, typed_data)

    def _sign_and_save(
        self, proxy_kind: ProxyKind, chain_id: ChainId, typed_data: TypedData
    ) -> FlowResult:
        domain_chain_id = typed_data["domain"]["chainId"]
        if domain_chain_id != chain_id:
            raise ValueError(
                f"Refusing to sign for chain id {domain_chain_id} during a run for {chain_id}"
            )

        store = SignatureStore.load(signatures_filepath(self.root, proxy_kind))
        if self.interactive:
            _confirm_signing(describe(typed_data), signer_address=self.signer.address)

        signature = self.signer.sign_typed_data(typed_data)
        store.merge(chain_id, signature).save()
        print(f"(i) Signed {proxy_kind} for chain id {chain_id}")
        return FlowResult(proxy_kind, chain_id, FlowOutcome.SIGNED, signature=signature)

    def run(self, chain_id: ChainId) -> List[FlowResult]:
        self._print_signing_info(chain_id)
        if self.interactive:
            _continue()

        results = list()
        for proxy_kind in SUPPORTED_PROXY_KINDS:
            if proxy_kind == UPGRADE_GATE:
                result = self.sign_upgrade_gate(chain_id)
            else:
                result = self.sign_proxy(proxy_kind, chain_id)
            results.append(result)
        return results

    def _print_signing_info(self, chain_id: ChainId) -> None:
        print(
            f"Signer: {self.signer.address}",
            f"Root: {self.root}",
            f"Chain ID: {chain_id}",
            f"Proxy kinds: {', '.join(SUPPORTED_PROXY_KINDS)}",
            sep="\n",
        )
