"""Tests for the synchronous blob sidecar client."""
import dataclasses
import json
from unittest.mock import Mock, patch

import pytest
import requests

from blob_sidecar_client import BlobSidecarClient, BlobSidecars, DecodeError, Format, TransportError
from blob_sidecar_client.client import DECODERS, FetchResult

from conftest import BASE_URL, LIVE_BLOCK_ID, LIVE_URL, make_response, make_session


def test_construction_performs_no_io():
    session = Mock(spec=requests.Session)
    client = BlobSidecarClient("http://unreachable.invalid", session=session)

    assert client.url == "http://unreachable.invalid"
    session.get.assert_not_called()


@pytest.mark.parametrize("base", [BASE_URL, BASE_URL + "/"])
def test_request_url(base):
    session = make_session((404,))
    BlobSidecarClient(base, session=session).fetch_sidecars("123")

    url = session.get.call_args.args[0]
    assert url == "http://beacon.test:5052/eth/v1/beacon/blob_sidecars/123"


def test_block_root_identifier_passed_through():
    root = "0x" + "ab" * 32
    session = make_session((404,))
    BlobSidecarClient(BASE_URL, session=session).fetch_sidecars(root)

    assert session.get.call_args.args[0].endswith(f"/eth/v1/beacon/blob_sidecars/{root}")


@pytest.mark.parametrize("fmt, accept", [
    (Format.JSON, "application/json"),
    (Format.SSZ, "application/octet-stream"),
])
def test_accept_header(fmt, accept):
    session = make_session((404,))
    BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", fmt)

    assert session.get.call_args.kwargs["headers"] == {"Accept": accept}


def test_timeout_passed_to_transport():
    session = make_session((404,))
    BlobSidecarClient(BASE_URL, session=session, timeout=2.5).fetch_sidecars("1")

    assert session.get.call_args.kwargs["timeout"] == 2.5


def test_fetch_json(sidecars, json_body):
    session = make_session((200, json_body, "application/json"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("123", Format.JSON)

    assert status == 200
    assert err is None
    assert result == sidecars
    assert [s.index for s in result] == [0, 1]
    assert all(s.slot == 123 for s in result)


def test_fetch_ssz(sidecars, ssz_body):
    session = make_session((200, ssz_body, "application/octet-stream"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("123", Format.SSZ)

    assert status == 200
    assert err is None
    assert result.data == sidecars.data


def test_fetch_ssz_empty_list():
    session = make_session((200, b"", "application/octet-stream"))
    result = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("5", Format.SSZ)

    assert result == FetchResult(200, BlobSidecars(), None)
    assert result.ok


@pytest.mark.parametrize("status", [400, 404, 500, 503])
@pytest.mark.parametrize("fmt", list(Format))
def test_non_200_status_is_returned_as_data(status, fmt):
    session = make_session((status, b"{not json", "application/json"))
    decoders = {f: Mock() for f in Format}
    with patch.dict(DECODERS, decoders):
        status_code, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", fmt)

    assert status_code == status
    assert err is None
    assert result == BlobSidecars()
    for decoder in decoders.values():
        decoder.assert_not_called()


@pytest.mark.parametrize("body", [
    b'{"data": [',
    b'not json at all',
    b'[]',
    b'{"data": {}}',
    b'{"data": [{"index": "0"}]}',
    b"[" * 200000 + b"]" * 200000,
    b'{"data": ' + b"[" * 200000 + b"]" * 200000 + b"}",
])
def test_malformed_json(body):
    session = make_session((200, body, "application/json"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", Format.JSON)

    assert status == 200
    assert isinstance(err, DecodeError)
    assert str(err).startswith("failed to decode json response")
    assert result == BlobSidecars()


def test_json_with_wrong_blob_length(sidecars):
    payload = sidecars.to_json()
    payload["data"][1]["blob"] = "0x" + "00" * 10
    session = make_session((200, json.dumps(payload).encode(), "application/json"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", Format.JSON)

    assert status == 200
    assert isinstance(err, DecodeError)
    assert len(result) == 0


@pytest.mark.parametrize("mangle", [
    lambda b: b[:-1],
    lambda b: b[:100],
    lambda b: b + b"\x00",
    lambda b: b"\x00" * 7,
])
def test_malformed_ssz(ssz_body, mangle):
    session = make_session((200, mangle(ssz_body), "application/octet-stream"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", Format.SSZ)

    assert status == 200
    assert isinstance(err, DecodeError)
    assert str(err).startswith("failed to decode ssz response")
    assert err.cause is not None
    assert result == BlobSidecars()


def test_transport_error_from_session():
    session = Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("connection refused")
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1")

    assert status == 500
    assert isinstance(err, TransportError)
    assert isinstance(err.__cause__, requests.ConnectionError)
    assert "connection refused" in str(err)
    assert result == BlobSidecars()


def test_transport_error_connection_refused():
    with BlobSidecarClient("http://127.0.0.1:1") as client:
        status, result, err = client.fetch_sidecars("1")

    assert status == 500
    assert isinstance(err, TransportError)
    assert result == BlobSidecars()


def test_transport_error_malformed_url():
    with BlobSidecarClient("not-a-url") as client:
        status, result, err = client.fetch_sidecars("1")

    assert status == 500
    assert isinstance(err, TransportError)
    assert str(err).startswith("failed to fetch sidecars")
    assert result == BlobSidecars()


@pytest.mark.parametrize("fmt", list(Format))
def test_fetch_is_idempotent(fmt, json_body, ssz_body):
    body = json_body if fmt is Format.JSON else ssz_body
    session = make_session((200, body), (200, body))
    client = BlobSidecarClient(BASE_URL, session=session)

    first = client.fetch_sidecars("123", fmt)
    second = client.fetch_sidecars("123", fmt)

    assert first.status_code == second.status_code == 200
    assert first.sidecars == second.sidecars
    assert first.sidecars is not second.sidecars


def test_content_type_mismatch_is_logged_not_fatal(caplog, json_body):
    session = make_session((200, json_body, "application/octet-stream"))
    status, result, err = BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", Format.JSON)

    assert err is None
    assert len(result) == 2
    assert "Content-Type application/octet-stream" in caplog.text


def test_raise_for_error(json_body):
    ok = BlobSidecarClient(BASE_URL, session=make_session((200, json_body))).fetch_sidecars("1")
    assert ok.raise_for_error() is ok.sidecars

    bad = BlobSidecarClient(BASE_URL, session=make_session((200, b"{"))).fetch_sidecars("1")
    assert not bad.ok
    with pytest.raises(DecodeError):
        bad.raise_for_error()


def test_close_only_owned_session():
    session = Mock(spec=requests.Session)
    BlobSidecarClient(BASE_URL, session=session).close()
    session.close.assert_not_called()

    with patch("blob_sidecar_client.client.requests.Session") as session_cls:
        with BlobSidecarClient(BASE_URL):
            pass
    session_cls.return_value.close.assert_called_once()


@pytest.mark.live
@pytest.mark.parametrize("fmt", list(Format))
def test_live_fetch(fmt):
    with BlobSidecarClient(LIVE_URL) as client:
        status, result, err = client.fetch_sidecars(LIVE_BLOCK_ID, fmt)

    assert err is None
    assert status in (200, 404)
    if status == 404:
        assert len(result) == 0


@pytest.mark.parametrize("status, body", [
    (404, b'{"code": 404}'),
    (200, b'{'),
    (200, b'{}'),
])
def test_response_closed_on_every_path(status, body):
    resp = make_response(status, body, "application/json")
    resp.close = Mock(wraps=resp.close)
    session = Mock(spec=requests.Session)
    session.get.return_value = resp

    BlobSidecarClient(BASE_URL, session=session).fetch_sidecars("1", Format.JSON)

    resp.close.assert_called_once()


def test_fetched_sidecars_are_immutable(json_body):
    result = BlobSidecarClient(BASE_URL, session=make_session((200, json_body))).fetch_sidecars("1")

    with pytest.raises(dataclasses.FrozenInstanceError):
        result.sidecars.data = []
