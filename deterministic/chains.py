from pathlib import Path
from typing import Dict, FrozenSet, Iterator, Mapping, NamedTuple, Optional

from eth_typing import ChecksumAddress

from deterministic.constants import (
    ADDRESSES_DIRNAME,
    CHAIN_CONFIGS_DIRNAME,
    CHAIN_OWNER_KEY,
    IMPLEMENTATION_ADDRESS_KEYS,
    SUPPORTED_PROXY_KINDS,
    UPGRADE_GATE,
)
from deterministic.types import ChainId, ProxyKind
from deterministic.utils import (
    ConfigParseError,
    Descriptor,
    load_descriptors,
    require_fields,
    validate_address,
)


class ConfigNotFound(LookupError):
    """Raised when a chain id is absent from a resolved set of chain configs."""

    def __init__(self, proxy_kind: ProxyKind, chain_id: ChainId, message: str = None):
        self.proxy_kind = proxy_kind
        self.chain_id = chain_id
        message = message or f"No chain config found for chain id {chain_id} ({proxy_kind})"
        super().__init__(message)


class MissingImplementationAddress(ConfigNotFound):
    """
    Raised when a chain has an address descriptor, but no implementation
    address for the requested proxy kind (i.e. it was never deployed there).
    """

    def __init__(self, proxy_kind: ProxyKind, chain_id: ChainId, field: str):
        self.field = field
        super().__init__(
            proxy_kind,
            chain_id,
            f"Address descriptor for chain id {chain_id} has no '{field}' ({proxy_kind})",
        )


class ChainConfig(NamedTuple):
    """Represents the per-chain parameters of a single signature."""

    chain_id: ChainId
    owner: ChecksumAddress
    implementation_address: Optional[ChecksumAddress] = None


class ResolvedChainConfigs(Mapping):
    """
    Read-only mapping of chain id to chain config for one proxy kind.

    Chains that were excluded because they lack an implementation address are
    remembered so that a lookup can say why it missed. Chains whose descriptors
    are malformed are kept aside with their parse error, which is only raised
    when that chain is looked up.
    """

    def __init__(
        self,
        proxy_kind: ProxyKind,
        configs: Dict[ChainId, ChainConfig],
        missing_implementation: FrozenSet[ChainId] = frozenset(),
        implementation_field: str = None,
        invalid: Mapping[ChainId, ConfigParseError] = None,
    ):
        self.proxy_kind = proxy_kind
        self._configs = dict(configs)
        self.missing_implementation = frozenset(missing_implementation)
        self.implementation_field = implementation_field
        self.invalid = dict(invalid or {})

    def __getitem__(self, chain_id: ChainId) -> ChainConfig:
        return self._configs[chain_id]

    def __iter__(self) -> Iterator[ChainId]:
        return iter(sorted(self._configs))

    def __len__(self) -> int:
        return len(self._configs)

    def lookup(self, chain_id: ChainId) -> ChainConfig:
        """
        Returns the chain config for a chain id. Raises the ConfigParseError of the
        chain's descriptors if they are malformed, or ConfigNotFound if it has no config.
        """
        try:
            return self._configs[chain_id]
        except KeyError:
            if chain_id in self.invalid:
                raise self.invalid[chain_id] from None
            if chain_id in self.missing_implementation:
                raise MissingImplementationAddress(
                    self.proxy_kind, chain_id, field=self.implementation_field
                )
            raise ConfigNotFound(self.proxy_kind, chain_id)


class ChainConfigResolver:
    """Builds chain configs from the chain and address descriptors found under a root directory."""

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def chain_configs_dir(self) -> Path:
        return self.root / CHAIN_CONFIGS_DIRNAME

    @property
    def addresses_dir(self) -> Path:
        return self.root / ADDRESSES_DIRNAME

    def _chain_descriptor_path(self, chain_id: ChainId) -> Path:
        return self.chain_configs_dir / f"{chain_id}.json"

    def _owner(self, chain_id: ChainId, descriptor: Descriptor) -> ChecksumAddress:
        source = self._chain_descriptor_path(chain_id)
        require_fields(descriptor, [CHAIN_OWNER_KEY], source)
        return validate_address(descriptor[CHAIN_OWNER_KEY], CHAIN_OWNER_KEY, source)

    def resolve(self, proxy_kind: ProxyKind) -> ResolvedChainConfigs:
        """Resolves the chain configs visible on disk for a proxy kind."""
        if proxy_kind not in SUPPORTED_PROXY_KINDS:
            raise ValueError(f"Unsupported proxy kind '{proxy_kind}'")
        if proxy_kind == UPGRADE_GATE:
            return self._resolve_owners(proxy_kind)
        return self._resolve_implementations(proxy_kind)

    def _resolve_owners(self, proxy_kind: ProxyKind) -> ResolvedChainConfigs:
        chain_descriptors, invalid = load_descriptors(self.chain_configs_dir)
        configs = dict()
        for chain_id, descriptor in chain_descriptors.items():
            try:
                owner = self._owner(chain_id, descriptor)
            except ConfigParseError as e:
                invalid[chain_id] = e
                continue
            configs[chain_id] = ChainConfig(chain_id=chain_id, owner=owner)
        return ResolvedChainConfigs(proxy_kind=proxy_kind, configs=configs, invalid=invalid)

    def _resolve_implementations(self, proxy_kind: ProxyKind) -> ResolvedChainConfigs:
        field = IMPLEMENTATION_ADDRESS_KEYS[proxy_kind]
        address_descriptors, invalid = load_descriptors(self.addresses_dir)
        chain_descriptors, invalid_chains = load_descriptors(self.chain_configs_dir)

        configs, missing = dict(), set()
        for chain_id, addresses in address_descriptors.items():
            if addresses.get(field) is None:
                # not every proxy kind is deployed on every chain
                missing.add(chain_id)
                continue
            try:
                configs[chain_id] = self._implementation_config(
                    chain_id, addresses, field, chain_descriptors, invalid_chains
                )
            except ConfigParseError as e:
                invalid[chain_id] = e

        return ResolvedChainConfigs(
            proxy_kind=proxy_kind,
            configs=configs,
            missing_implementation=frozenset(missing),
            implementation_field=field,
            invalid=invalid,
        )

    def _implementation_config(
        self,
        chain_id: ChainId,
        addresses: Descriptor,
        field: str,
        chain_descriptors: Dict[ChainId, Descriptor],
        invalid_chains: Dict[ChainId, ConfigParseError],
    ) -> ChainConfig:
        if chain_id in invalid_chains:
            raise invalid_chains[chain_id]
        chain_descriptor = chain_descriptors.get(chain_id)
        if chain_descriptor is None:
            raise ConfigParseError(
                f"Address descriptor for chain id {chain_id} has no matching "
                f"chain descriptor at {self._chain_descriptor_path(chain_id)}"
            )
        return ChainConfig(
            chain_id=chain_id,
            owner=self._owner(chain_id, chain_descriptor),
            implementation_address=validate_address(
                addresses[field], field, self.addresses_dir / f"{chain_id}.json"
            ),
        )
