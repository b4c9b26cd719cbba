import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from eth_typing import ChecksumAddress
from eth_utils import is_address, is_hexstr, to_checksum_address

from deterministic.types import ChainId

Descriptor = Dict[str, Any]


class ConfigParseError(ValueError):
    """Raised when a params file or a chain descriptor is missing or malformed."""


def _load_json(filepath: Path) -> Any:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def is_canonical_chain_id(value: str) -> bool:
    """True for the plain base-10 form of a positive chain id, e.g. '8453' but not '08453'."""
    return value.isascii() and value.isdigit() and not value.startswith("0")


def chain_id_from_filepath(filepath: Path) -> ChainId:
    """Returns the chain ID encoded in a descriptor filename, e.g. '8453.json'."""
    stem = filepath.stem
    if not is_canonical_chain_id(stem):
        raise ConfigParseError(f"Descriptor {filepath} is not named after a chain id.")
    return int(stem)


def load_descriptor(filepath: Path) -> Descriptor:
    """Loads a chain or address descriptor, which must be a JSON object."""
    try:
        contents = _load_json(filepath)
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"Descriptor {filepath} is not valid JSON: {e}") from e
    if not isinstance(contents, dict):
        raise ConfigParseError(f"Descriptor {filepath} must contain a JSON object.")
    return contents


def _try_load_descriptor(filepath: Path):
    try:
        return load_descriptor(filepath)
    except ConfigParseError as e:
        return e


def load_descriptors(
    directory: Path,
) -> Tuple[Dict[ChainId, Descriptor], Dict[ChainId, ConfigParseError]]:
    """
    Loads every '<chain id>.json' descriptor in a directory.

    Returns the parsed descriptors and, separately, the parse error of every
    descriptor that could not be read, both keyed by chain id. A file that is not
    named after a chain id cannot be attributed to any chain and fails the whole load.
    Reads are independent of each other, so they are fanned out over a thread pool.
    """
    # canonical stems make the chain id of every file unique
    filepaths = {
        chain_id_from_filepath(filepath): filepath
        for filepath in sorted(directory.glob("*.json"))
    }

    descriptors, failures = dict(), dict()
    if not filepaths:
        return descriptors, failures
    with ThreadPoolExecutor() as executor:
        results = executor.map(_try_load_descriptor, filepaths.values())
        for chain_id, result in zip(filepaths, results):
            if isinstance(result, ConfigParseError):
                failures[chain_id] = result
            else:
                descriptors[chain_id] = result
    return descriptors, failures


def validate_address(value: Any, field: str, source: Path) -> ChecksumAddress:
    """Returns the checksum form of an address field or raises ConfigParseError."""
    if not isinstance(value, str) or not is_address(value):
        raise ConfigParseError(f"'{field}' in {source} is not a valid address: {value!r}")
    return to_checksum_address(value)


def validate_hexstr(value: Any, field: str, source: Path, size: int = None) -> str:
    """
    Checks that a field is a 0x-prefixed hex string, optionally of an exact byte size.
    The value is returned unchanged.
    """
    if not isinstance(value, str) or not value.startswith("0x") or not is_hexstr(value):
        raise ConfigParseError(f"'{field}' in {source} is not a 0x-prefixed hex string.")
    byte_length, remainder = divmod(len(value) - 2, 2)
    if remainder or byte_length == 0:
        raise ConfigParseError(f"'{field}' in {source} is not a whole number of bytes.")
    if size is not None and byte_length != size:
        raise ConfigParseError(
            f"'{field}' in {source} must be {size} bytes long, got {byte_length}."
        )
    return value


def require_fields(data: Dict[str, Any], fields: Sequence[str], source: Path) -> None:
    missing = [field for field in fields if field not in data]
    if missing:
        raise ConfigParseError(f"{source} is missing required field(s): {', '.join(missing)}")
