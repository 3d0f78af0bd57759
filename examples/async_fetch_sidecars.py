"""Async example: fetch sidecars for a range of slots concurrently

One shared httpx.AsyncClient serves every request; its timeout applies to all fetches.
"""
import asyncio

import httpx

from blob_sidecar_client import AsyncBlobSidecarClient, Format

BEACON_URL = 'http://localhost:5052'
SLOTS = range(9000000, 9000010)


async def main():
    async with httpx.AsyncClient(timeout=30) as http_client:
        client = AsyncBlobSidecarClient(BEACON_URL, client=http_client)
        results = await asyncio.gather(*[client.fetch_sidecars(str(slot), Format.SSZ) for slot in SLOTS])

    for slot, (status, sidecars, err) in zip(SLOTS, results):
        if err is not None:
            print(f"✗ slot {slot}: {err}")
        elif status == 404:
            print(f"- slot {slot}: no block or no blobs")
        else:
            print(f"✓ slot {slot}: {len(sidecars)} sidecars (status {status})")


if __name__ == "__main__":
    asyncio.run(main())
