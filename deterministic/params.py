import json
from pathlib import Path
from typing import Any, Dict, NamedTuple, Union

from eth_typing import ChecksumAddress

from deterministic.constants import (
    DETERMINISTIC_CONFIG_DIRNAME,
    PARAMS_FILENAME,
    SIGNATURES_FILENAME,
    UPGRADE_GATE,
)
from deterministic.types import ProxyKind
from deterministic.utils import (
    ConfigParseError,
    _load_json,
    require_fields,
    validate_address,
    validate_hexstr,
)


class DeterministicProxyConfig(NamedTuple):
    """Deployment parameters shared by every chain a proxy is deployed to."""

    proxy_deployer_address: ChecksumAddress
    proxy_salt: str
    proxy_shim_salt: str
    proxy_creation_code: str

    # keys of params.json
    FIELDS = ("proxyDeployerAddress", "proxySalt", "proxyShimSalt", "proxyCreationCode")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Path) -> "DeterministicProxyConfig":
        require_fields(data, cls.FIELDS, source)
        return cls(
            proxy_deployer_address=validate_address(
                data["proxyDeployerAddress"], "proxyDeployerAddress", source
            ),
            proxy_salt=validate_hexstr(data["proxySalt"], "proxySalt", source, size=32),
            proxy_shim_salt=validate_hexstr(
                data["proxyShimSalt"], "proxyShimSalt", source, size=32
            ),
            proxy_creation_code=validate_hexstr(
                data["proxyCreationCode"], "proxyCreationCode", source
            ),
        )


class GenericDeployConfig(NamedTuple):
    """Deployment parameters of a contract created through createGenericContract."""

    creation_code: str
    salt: str
    deployer_address: ChecksumAddress
    upgrade_gate_address: ChecksumAddress
    proxy_deployer_address: ChecksumAddress

    FIELDS = (
        "creationCode",
        "salt",
        "deployerAddress",
        "upgradeGateAddress",
        "proxyDeployerAddress",
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Path) -> "GenericDeployConfig":
        require_fields(data, cls.FIELDS, source)
        return cls(
            creation_code=validate_hexstr(data["creationCode"], "creationCode", source),
            salt=validate_hexstr(data["salt"], "salt", source, size=32),
            deployer_address=validate_address(data["deployerAddress"], "deployerAddress", source),
            upgrade_gate_address=validate_address(
                data["upgradeGateAddress"], "upgradeGateAddress", source
            ),
            proxy_deployer_address=validate_address(
                data["proxyDeployerAddress"], "proxyDeployerAddress", source
            ),
        )


DeploymentConfig = Union[DeterministicProxyConfig, GenericDeployConfig]


def proxy_config_dir(root: Path, proxy_kind: ProxyKind) -> Path:
    """Returns the directory holding params.json and signatures.json for a proxy kind."""
    return root / DETERMINISTIC_CONFIG_DIRNAME / proxy_kind


def params_filepath(root: Path, proxy_kind: ProxyKind) -> Path:
    return proxy_config_dir(root, proxy_kind) / PARAMS_FILENAME


def signatures_filepath(root: Path, proxy_kind: ProxyKind) -> Path:
    return proxy_config_dir(root, proxy_kind) / SIGNATURES_FILENAME


def load_deployment_config(root: Path, proxy_kind: ProxyKind) -> DeploymentConfig:
    """
    Loads and validates the params.json of a proxy kind.

    The upgrade gate is deployed with createGenericContract and so uses the generic
    schema; every other proxy kind uses the deterministic proxy schema.
    """
    filepath = params_filepath(root, proxy_kind)
    if not filepath.exists():
        raise ConfigParseError(f"No params file found for '{proxy_kind}' at {filepath}")
    try:
        data = _load_json(filepath)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Params file {filepath} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigParseError(f"Params file {filepath} must contain a JSON object.")

    if proxy_kind == UPGRADE_GATE:
        return GenericDeployConfig.from_dict(data, source=filepath)
    return DeterministicProxyConfig.from_dict(data, source=filepath)
