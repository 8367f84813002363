"""Tests for compact token construction and segment decoding."""

import base64
import json

import pytest

from webjwt.codec.base64url import parse, stringify
from webjwt.codec.token import (
    assemble_token,
    build_signing_input,
    decode_segment,
    encode_header,
    encode_payload,
    split_token,
)
from webjwt.core.errors import (
    InvalidPayloadError,
    MalformedSegmentError,
    MalformedTokenError,
)


def _segment(text: str) -> str:
    return stringify(text.encode())


class TestEncodeHeader:
    """Tests for header serialization."""

    def test_alg_is_added(self) -> None:
        header = json.loads(parse(encode_header({"typ": "JWT"}, "HS256")))
        assert header == {"typ": "JWT", "alg": "HS256"}

    def test_alg_overrides_caller_value(self) -> None:
        header = json.loads(parse(encode_header({"alg": "none"}, "RS256")))
        assert header == {"alg": "RS256"}

    def test_compact_json(self) -> None:
        encoded = encode_header({"typ": "JWT"}, "HS256")
        assert parse(encoded) == b'{"typ":"JWT","alg":"HS256"}'

    def test_deterministic(self) -> None:
        header = {"kid": "k1", "typ": "JWT"}
        assert encode_header(header, "ES256") == encode_header(header, "ES256")


class TestEncodePayload:
    """Tests for payload serialization."""

    def test_utf8_is_kept_literal(self) -> None:
        encoded = encode_payload({"name": "Zoë"})
        assert parse(encoded) == '{"name":"Zoë"}'.encode()

    def test_unserializable_rejected(self) -> None:
        with pytest.raises(InvalidPayloadError):
            encode_payload({"when": object()})

    def test_nan_rejected(self) -> None:
        with pytest.raises(InvalidPayloadError):
            encode_payload({"value": float("nan")})


class TestAssembly:
    """Tests for joining segments."""

    def test_signing_input(self) -> None:
        assert build_signing_input("aaa", "bbb") == "aaa.bbb"

    def test_assemble(self) -> None:
        assert assemble_token("aaa.bbb", "ccc") == "aaa.bbb.ccc"


class TestDecodeSegment:
    """Tests for segment decoding."""

    @pytest.mark.parametrize(
        "text", ['{"a":1}', '{"ab":1}', '{"abc":1}', '{"sub":"user-1"}']
    )
    def test_restores_padding(self, text: str) -> None:
        assert decode_segment(_segment(text)) == json.loads(text)

    def test_url_alphabet(self) -> None:
        text = '{"k":"??>>"}'
        segment = _segment(text)
        assert "-" in segment
        assert decode_segment(segment) == {"k": "??>>"}

    def test_padded_segment_accepted(self) -> None:
        padded = base64.urlsafe_b64encode(b'{"a":1}').decode()
        assert padded.endswith("=")
        assert decode_segment(padded) == {"a": 1}

    def test_invalid_json_returns_none(self) -> None:
        assert decode_segment(_segment("not json")) is None

    def test_invalid_utf8_returns_none(self) -> None:
        assert decode_segment(stringify(b"\xff\xfe\xfd")) is None

    def test_non_ascii_returns_none(self) -> None:
        assert decode_segment("é123") is None

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_non_json_constants_return_none(self, literal: str) -> None:
        assert decode_segment(_segment(f'{{"exp":{literal}}}')) is None

    def test_invalid_base64_returns_none(self) -> None:
        assert decode_segment("****") is None

    def test_remainder_of_one_raises(self) -> None:
        with pytest.raises(MalformedSegmentError):
            decode_segment("abcde")

    def test_malformed_segment_is_malformed_token(self) -> None:
        assert issubclass(MalformedSegmentError, MalformedTokenError)


class TestSplitToken:
    """Tests for splitting tokens into parts."""

    def test_three_parts(self) -> None:
        assert split_token("a.b.c") == ("a", "b", "c")

    def test_empty_signature_allowed(self) -> None:
        assert split_token("a.b.") == ("a", "b", "")

    @pytest.mark.parametrize("token", ["", "a", "a.b", "a.b.c.d"])
    def test_wrong_part_count(self, token: str) -> None:
        with pytest.raises(MalformedTokenError):
            split_token(token)
