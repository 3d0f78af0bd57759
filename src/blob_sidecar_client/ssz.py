"""SSZ schema for deneb blob sidecars, backed by remerkleable."""

import logging
from typing import Iterable, List

from remerkleable.basic import uint64
from remerkleable.byte_arrays import ByteVector
from remerkleable.complex import Container, List as SSZList, Vector

from .errors import DecodeError
from .models import (
    BYTES_PER_BLOB,
    KZG_COMMITMENT_INCLUSION_PROOF_DEPTH,
    KZG_LENGTH,
    MAX_BLOB_COMMITMENTS_PER_BLOCK,
    ROOT_LENGTH,
    SIGNATURE_LENGTH,
    BeaconBlockHeader,
    BlobSidecar,
    SignedBeaconBlockHeader,
)

logger = logging.getLogger(__name__)


class Root(ByteVector[ROOT_LENGTH]):
    pass


class KZGBytes(ByteVector[KZG_LENGTH]):
    pass


class BLSSignature(ByteVector[SIGNATURE_LENGTH]):
    pass


class Blob(ByteVector[BYTES_PER_BLOB]):
    pass


InclusionProof = Vector[Root, KZG_COMMITMENT_INCLUSION_PROOF_DEPTH]


class BeaconBlockHeaderView(Container):
    slot: uint64
    proposer_index: uint64
    parent_root: Root
    state_root: Root
    body_root: Root


class SignedBeaconBlockHeaderView(Container):
    message: BeaconBlockHeaderView
    signature: BLSSignature


class BlobSidecarView(Container):
    index: uint64
    blob: Blob
    kzg_commitment: KZGBytes
    kzg_proof: KZGBytes
    signed_block_header: SignedBeaconBlockHeaderView
    kzg_commitment_inclusion_proof: InclusionProof


BlobSidecarListView = SSZList[BlobSidecarView, MAX_BLOB_COMMITMENTS_PER_BLOCK]


def _from_view(view: BlobSidecarView) -> BlobSidecar:
    header = view.signed_block_header.message
    return BlobSidecar(
        index=int(view.index),
        blob=bytes(view.blob),
        kzg_commitment=bytes(view.kzg_commitment),
        kzg_proof=bytes(view.kzg_proof),
        signed_block_header=SignedBeaconBlockHeader(
            message=BeaconBlockHeader(
                slot=int(header.slot),
                proposer_index=int(header.proposer_index),
                parent_root=bytes(header.parent_root),
                state_root=bytes(header.state_root),
                body_root=bytes(header.body_root),
            ),
            signature=bytes(view.signed_block_header.signature),
        ),
        kzg_commitment_inclusion_proof=[bytes(p) for p in view.kzg_commitment_inclusion_proof],
    )


def _to_view(sidecar: BlobSidecar) -> BlobSidecarView:
    header = sidecar.signed_block_header.message
    return BlobSidecarView(
        index=uint64(sidecar.index),
        blob=Blob(sidecar.blob),
        kzg_commitment=KZGBytes(sidecar.kzg_commitment),
        kzg_proof=KZGBytes(sidecar.kzg_proof),
        signed_block_header=SignedBeaconBlockHeaderView(
            message=BeaconBlockHeaderView(
                slot=uint64(header.slot),
                proposer_index=uint64(header.proposer_index),
                parent_root=Root(header.parent_root),
                state_root=Root(header.state_root),
                body_root=Root(header.body_root),
            ),
            signature=BLSSignature(sidecar.signed_block_header.signature),
        ),
        kzg_commitment_inclusion_proof=InclusionProof(
            *[Root(p) for p in sidecar.kzg_commitment_inclusion_proof]
        ),
    )


def decode_blob_sidecars(data: bytes) -> List[BlobSidecar]:
    """Decode an SSZ ``List[BlobSidecar, MAX_BLOB_COMMITMENTS_PER_BLOCK]``.

    :param data: Raw response body.
    :return: Sidecars in wire order.
    :raises DecodeError: If the bytes are not a valid encoding.
    """
    try:
        views = BlobSidecarListView.decode_bytes(data)
    except Exception as e:
        # remerkleable signals malformed input with a mix of exception types
        raise DecodeError(f"failed to decode ssz response: {e}", e) from e
    logger.debug(f"Decoded {len(views)} sidecars from {len(data)} ssz bytes")
    return [_from_view(v) for v in views]


def encode_blob_sidecars(sidecars: Iterable[BlobSidecar]) -> bytes:
    """Encode sidecars as the SSZ list a beacon node serves."""
    return BlobSidecarListView(*[_to_view(s) for s in sidecars]).encode_bytes()
