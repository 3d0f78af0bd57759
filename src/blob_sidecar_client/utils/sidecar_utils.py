"""Utility functions for generating sample blob sidecars for tests and examples."""

import random
from typing import List

from ..models import (
    BYTES_PER_BLOB,
    KZG_COMMITMENT_INCLUSION_PROOF_DEPTH,
    KZG_LENGTH,
    ROOT_LENGTH,
    SIGNATURE_LENGTH,
    BeaconBlockHeader,
    BlobSidecar,
    BlobSidecars,
    SignedBeaconBlockHeader,
)


def make_blob_sidecar(index: int = 0, slot: int = 1, proposer_index: int = 7, seed: int = 0) -> BlobSidecar:
    """Create a structurally valid sidecar filled with deterministic pseudo-random bytes.

    The bytes are not a real KZG commitment or signature; they only satisfy
    the field lengths.

    :param index: Sidecar index within the block.
    :param slot: Slot of the signed block header.
    :param proposer_index: Proposer index of the signed block header.
    :param seed: Seed for the byte generator; same arguments give the same sidecar.
    :return: BlobSidecar
    """
    rng = random.Random(f"{seed}:{slot}:{index}")
    header = BeaconBlockHeader(
        slot=slot,
        proposer_index=proposer_index,
        parent_root=rng.randbytes(ROOT_LENGTH),
        state_root=rng.randbytes(ROOT_LENGTH),
        body_root=rng.randbytes(ROOT_LENGTH),
    )
    return BlobSidecar(
        index=index,
        blob=rng.randbytes(BYTES_PER_BLOB),
        kzg_commitment=rng.randbytes(KZG_LENGTH),
        kzg_proof=rng.randbytes(KZG_LENGTH),
        signed_block_header=SignedBeaconBlockHeader(message=header, signature=rng.randbytes(SIGNATURE_LENGTH)),
        kzg_commitment_inclusion_proof=[rng.randbytes(ROOT_LENGTH) for _ in range(KZG_COMMITMENT_INCLUSION_PROOF_DEPTH)],
    )


def make_blob_sidecars(count: int = 2, slot: int = 1, seed: int = 0) -> BlobSidecars:
    """Create a collection of ``count`` sidecars for one slot, indexed from 0."""
    sidecars: List[BlobSidecar] = [make_blob_sidecar(index=i, slot=slot, seed=seed) for i in range(count)]
    return BlobSidecars(data=sidecars)
