"""Fetch blob sidecars for a slot in both JSON and SSZ

Demonstrates content negotiation against a beacon node's blob sidecar endpoint.
"""
import sys

from blob_sidecar_client import BlobSidecarClient, Format

BEACON_URL = 'http://localhost:5052'
block_id = sys.argv[1] if len(sys.argv) > 1 else 'head'

with BlobSidecarClient(BEACON_URL, timeout=30) as client:
    for fmt in Format:
        print(f"=== {fmt.name} ({fmt.value}) ===")
        status, sidecars, err = client.fetch_sidecars(block_id, fmt)
        if err is not None:
            print(f"Error (status {status}): {err}")
            continue
        if status != 200:
            print(f"No sidecars, server returned {status}")
            continue
        print(f"Fetched {len(sidecars)} sidecars")
        for sidecar in sidecars:
            print(f"  slot={sidecar.slot} index={sidecar.index} commitment={sidecar.kzg_commitment.hex()[:16]}...")
