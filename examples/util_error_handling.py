"""Utility: Error handling patterns

Fetches never raise; branch on the status code and the error type instead.
"""
from blob_sidecar_client import BlobSidecarClient, DecodeError, TransportError

print("=== Scenario 1: Unreachable beacon node ===")
with BlobSidecarClient('http://127.0.0.1:1') as client:
    status, sidecars, err = client.fetch_sidecars('head')
    print(f"status={status} transport_error={isinstance(err, TransportError)}: {err}")

print("\n=== Scenario 2: Branching on the outcome ===")
with BlobSidecarClient('http://localhost:5052', timeout=10) as client:
    result = client.fetch_sidecars('0')
    if isinstance(result.error, TransportError):
        print("No response received; safe to retry later")
    elif isinstance(result.error, DecodeError):
        print(f"Server said 200 but the payload was bad: {result.error}")
    elif result.status_code == 404:
        print("Nothing stored for that block id")
    elif result.status_code != 200:
        print(f"Server error {result.status_code}; caller decides whether to retry")
    else:
        print(f"Got {len(result.sidecars)} sidecars")

print("\n=== Scenario 3: Opting into exceptions ===")
with BlobSidecarClient('http://127.0.0.1:1') as client:
    try:
        client.fetch_sidecars('head').raise_for_error()
    except TransportError as e:
        print(f"Raised: {e} (cause: {type(e.cause).__name__})")
