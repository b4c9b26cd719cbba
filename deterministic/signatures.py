import hashlib
import json
import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from eth_utils import is_hexstr

from deterministic.types import ChainId
from deterministic.utils import is_canonical_chain_id

Signatures = Dict[str, str]

STANDARD_SIGNATURES_JSON_FORMAT = {"indent": 2, "separators": (",", ": ")}


def _digest(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _read_bytes(filepath: Path) -> Optional[bytes]:
    """Returns the raw contents of a file, or None if there is no such file."""
    try:
        with open(filepath, "rb") as file:
            return file.read()
    except FileNotFoundError:
        return None


def _sort_key(chain_id: str) -> int:
    return int(chain_id)


def merge_signature(signatures: Mapping[str, str], chain_id: ChainId, signature: str) -> Signatures:
    """
    Returns a copy of the signatures with the entry for chain_id added or replaced.
    Every other entry is kept as is.
    """
    merged = dict(signatures)
    merged[str(chain_id)] = signature
    return merged


def serialize_signatures(signatures: Mapping[str, str]) -> bytes:
    """Serializes signatures ordered by chain id."""
    ordered = {chain_id: signatures[chain_id] for chain_id in sorted(signatures, key=_sort_key)}
    return json.dumps(ordered, **STANDARD_SIGNATURES_JSON_FORMAT).encode("utf-8")


class SignatureStore:
    """
    Signatures of a single proxy kind, indexed by chain id.

    The store remembers the digest of the file it was loaded from. Saving re-reads
    the file and refuses to overwrite it if its digest changed in the meantime.
    """

    class Corrupt(ValueError):
        """Raised when an existing signatures file cannot be parsed"""

    class Conflict(RuntimeError):
        """Raised when the signatures file changed on disk after it was loaded"""

    def __init__(self, filepath: Path, signatures: Mapping[str, str], base_digest: Optional[str]):
        self.filepath = Path(filepath)
        self.signatures = dict(signatures)
        self.base_digest = base_digest

    def __contains__(self, chain_id: ChainId) -> bool:
        return str(chain_id) in self.signatures

    def __len__(self) -> int:
        return len(self.signatures)

    def get(self, chain_id: ChainId) -> Optional[str]:
        return self.signatures.get(str(chain_id))

    def chain_ids(self):
        return sorted(int(chain_id) for chain_id in self.signatures)

    @classmethod
    def load(cls, filepath: Path) -> "SignatureStore":
        """
        Loads a signatures file. A missing file is an empty store,
        while a file that exists but cannot be parsed is fatal.
        """
        filepath = Path(filepath)
        data = _read_bytes(filepath)
        if data is None:
            print(f"No signatures found at {filepath}, starting a new store.")
            return cls(filepath=filepath, signatures=dict(), base_digest=None)

        try:
            signatures = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise cls.Corrupt(f"Signatures file {filepath} is not valid JSON: {e}") from e
        cls._validate(signatures, filepath)
        return cls(filepath=filepath, signatures=signatures, base_digest=_digest(data))

    @classmethod
    def _validate(cls, signatures, filepath: Path) -> None:
        if not isinstance(signatures, dict):
            raise cls.Corrupt(f"Signatures file {filepath} must contain a JSON object.")
        for chain_id, signature in signatures.items():
            if not is_canonical_chain_id(chain_id):
                raise cls.Corrupt(f"Invalid chain id '{chain_id}' in {filepath}.")
            if not isinstance(signature, str) or not is_hexstr(signature):
                raise cls.Corrupt(f"Invalid signature for chain id {chain_id} in {filepath}.")

    def merge(self, chain_id: ChainId, signature: str) -> "SignatureStore":
        """Returns a new store with the signature of chain_id added or replaced."""
        return SignatureStore(
            filepath=self.filepath,
            signatures=merge_signature(self.signatures, chain_id, signature),
            base_digest=self.base_digest,
        )

    def save(self) -> Path:
        """Writes the whole store back to its file, unless the file changed since it was loaded."""
        current = _read_bytes(self.filepath)
        current_digest = None if current is None else _digest(current)
        if current_digest != self.base_digest:
            raise self.Conflict(
                f"Signatures file {self.filepath} was modified after it was loaded; "
                "re-run to sign against the latest store."
            )

        # Create the parent directory if it does not exist
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

        data = serialize_signatures(self.signatures)
        temp_filepath = self.filepath.with_suffix(".temp.json")
        with open(temp_filepath, "wb") as file:
            file.write(data)
        os.replace(temp_filepath, self.filepath)

        self.base_digest = _digest(data)
        print(f"Signatures written to {self.filepath}")
        return self.filepath
