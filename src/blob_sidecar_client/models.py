"""In-memory blob sidecar types and their beacon-API JSON codec."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import DecodeError

# Deneb preset values
BYTES_PER_BLOB = 4096 * 32
KZG_COMMITMENT_INCLUSION_PROOF_DEPTH = 17
MAX_BLOB_COMMITMENTS_PER_BLOCK = 4096

ROOT_LENGTH = 32
KZG_LENGTH = 48
SIGNATURE_LENGTH = 96

_UINT64_MAX = 2**64 - 1


def _field(obj: Dict[str, Any], name: str, where: str) -> Any:
    if not isinstance(obj, dict):
        raise DecodeError(f"{where}: expected object, got {type(obj).__name__}")
    if name not in obj:
        raise DecodeError(f"{where}: {name} missing")
    return obj[name]


def _parse_uint64(value: Any, where: str) -> int:
    # Beacon API encodes integers as decimal strings
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise DecodeError(f"{where}: invalid uint64 {value!r}")
    number = int(value)
    if number > _UINT64_MAX:
        raise DecodeError(f"{where}: uint64 overflow {value!r}")
    return number


def _parse_hex(value: Any, length: int, where: str) -> bytes:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise DecodeError(f"{where}: expected 0x-prefixed hex string")
    try:
        raw = bytes.fromhex(value[2:])
    except ValueError as e:
        raise DecodeError(f"{where}: invalid hex: {e}", e) from e
    if len(raw) != length:
        raise DecodeError(f"{where}: expected {length} bytes, got {len(raw)}")
    return raw


def _hex(raw: bytes) -> str:
    return "0x" + raw.hex()


@dataclass(frozen=True)
class BeaconBlockHeader:
    slot: int
    proposer_index: int
    parent_root: bytes
    state_root: bytes
    body_root: bytes

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "BeaconBlockHeader":
        where = "message"
        return cls(
            slot=_parse_uint64(_field(obj, "slot", where), "slot"),
            proposer_index=_parse_uint64(_field(obj, "proposer_index", where), "proposer_index"),
            parent_root=_parse_hex(_field(obj, "parent_root", where), ROOT_LENGTH, "parent_root"),
            state_root=_parse_hex(_field(obj, "state_root", where), ROOT_LENGTH, "state_root"),
            body_root=_parse_hex(_field(obj, "body_root", where), ROOT_LENGTH, "body_root"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "slot": str(self.slot),
            "proposer_index": str(self.proposer_index),
            "parent_root": _hex(self.parent_root),
            "state_root": _hex(self.state_root),
            "body_root": _hex(self.body_root),
        }


@dataclass(frozen=True)
class SignedBeaconBlockHeader:
    message: BeaconBlockHeader
    signature: bytes

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "SignedBeaconBlockHeader":
        where = "signed_block_header"
        return cls(
            message=BeaconBlockHeader.from_json(_field(obj, "message", where)),
            signature=_parse_hex(_field(obj, "signature", where), SIGNATURE_LENGTH, "signature"),
        )

    def to_json(self) -> Dict[str, Any]:
        return {"message": self.message.to_json(), "signature": _hex(self.signature)}


@dataclass(frozen=True)
class BlobSidecar:
    """A single deneb blob sidecar."""
    index: int
    blob: bytes
    kzg_commitment: bytes
    kzg_proof: bytes
    signed_block_header: SignedBeaconBlockHeader
    kzg_commitment_inclusion_proof: List[bytes]

    @property
    def slot(self) -> int:
        return self.signed_block_header.message.slot

    @classmethod
    def from_json(cls, obj: Dict[str, Any]) -> "BlobSidecar":
        """Build a sidecar from its beacon-API JSON object.

        :param obj: Decoded JSON object for one sidecar.
        :return: BlobSidecar with every field validated.
        :raises DecodeError: On a missing field, bad hex, or wrong byte length.
        """
        where = "sidecar"
        proof = _field(obj, "kzg_commitment_inclusion_proof", where)
        if not isinstance(proof, list) or len(proof) != KZG_COMMITMENT_INCLUSION_PROOF_DEPTH:
            raise DecodeError(
                f"kzg_commitment_inclusion_proof: expected {KZG_COMMITMENT_INCLUSION_PROOF_DEPTH} elements"
            )
        return cls(
            index=_parse_uint64(_field(obj, "index", where), "index"),
            blob=_parse_hex(_field(obj, "blob", where), BYTES_PER_BLOB, "blob"),
            kzg_commitment=_parse_hex(_field(obj, "kzg_commitment", where), KZG_LENGTH, "kzg_commitment"),
            kzg_proof=_parse_hex(_field(obj, "kzg_proof", where), KZG_LENGTH, "kzg_proof"),
            signed_block_header=SignedBeaconBlockHeader.from_json(_field(obj, "signed_block_header", where)),
            kzg_commitment_inclusion_proof=[
                _parse_hex(p, ROOT_LENGTH, "kzg_commitment_inclusion_proof") for p in proof
            ],
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "index": str(self.index),
            "blob": _hex(self.blob),
            "kzg_commitment": _hex(self.kzg_commitment),
            "kzg_proof": _hex(self.kzg_proof),
            "signed_block_header": self.signed_block_header.to_json(),
            "kzg_commitment_inclusion_proof": [_hex(p) for p in self.kzg_commitment_inclusion_proof],
        }


@dataclass(frozen=True)
class BlobSidecars:
    """Ordered collection of blob sidecars as stored by the archiver.

    An instance with empty ``data`` is the zero value returned alongside
    any error or non-200 status.
    """
    data: List[BlobSidecar] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    @classmethod
    def from_json(cls, obj: Any) -> "BlobSidecars":
        """Validate a decoded ``{"data": [...]}`` response body.

        :param obj: Result of ``json.loads`` on the response body.
        :return: BlobSidecars holding every sidecar in order.
        :raises DecodeError: If the body does not match the schema.
        """
        if not isinstance(obj, dict):
            raise DecodeError(f"expected object, got {type(obj).__name__}")
        items = obj.get("data")
        if items is None:
            return cls()
        if not isinstance(items, list):
            raise DecodeError(f"data: expected list, got {type(items).__name__}")
        return cls(data=[BlobSidecar.from_json(item) for item in items])

    def to_json(self) -> Dict[str, Any]:
        return {"data": [s.to_json() for s in self.data]}
