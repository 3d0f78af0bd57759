"""Test configuration and shared fixtures."""
import io
import json
import os
from unittest.mock import Mock

import pytest
import requests

from blob_sidecar_client.ssz import encode_blob_sidecars
from blob_sidecar_client.utils.sidecar_utils import make_blob_sidecars

# Optional live beacon node - load from environment variable (e.g. http://localhost:5052)
LIVE_URL = os.getenv('BLOB_SIDECAR_TEST_URL')
# Block id known to carry blobs on the live node; defaults to the chain head
LIVE_BLOCK_ID = os.getenv('BLOB_SIDECAR_TEST_BLOCK_ID', 'head')

BASE_URL = 'http://beacon.test:5052'


def make_response(status_code: int, body: bytes = b'', content_type: str = None) -> requests.Response:
    """Build a real requests.Response backed by an in-memory body."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.raw = io.BytesIO(body)
    if content_type:
        resp.headers['Content-Type'] = content_type
    return resp


def make_session(*responses) -> Mock:
    """Session double returning a fresh copy of the given responses on each get()."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = [make_response(*r) for r in responses]
    return session


@pytest.fixture(scope='session')
def sidecars():
    """Two deterministic sidecars for slot 123."""
    return make_blob_sidecars(count=2, slot=123)


@pytest.fixture(scope='session')
def json_body(sidecars):
    return json.dumps(sidecars.to_json()).encode()


@pytest.fixture(scope='session')
def ssz_body(sidecars):
    return encode_blob_sidecars(sidecars.data)


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless a beacon node URL is configured."""
    if LIVE_URL:
        return
    skip_live = pytest.mark.skip(reason="BLOB_SIDECAR_TEST_URL not set")
    for item in items:
        if 'live' in item.keywords:
            item.add_marker(skip_live)
