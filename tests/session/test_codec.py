# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for the stored session format."""

import json

import pytest

from flysession.kernel.exceptions import SerializationError
from flysession.session.codec import SCHEMA_VERSION, decode_payload, encode_record
from flysession.session.record import SessionRecord


class TestEncodeDecode:
    def test_round_trip_preserves_value_and_timestamps(self):
        value = {"user": 42, "name": "Zoë", "flags": [True, None], "nested": {"x": 1.5}}
        record = SessionRecord("abc", value, last_update=10.5, last_cookie_update=3.0)

        stored = decode_payload(encode_record(record))

        assert stored.value == value
        assert stored.last_update == 10.5
        assert stored.last_cookie_update == 3.0

    def test_encoded_document_layout(self):
        record = SessionRecord("abc", {"k": "v"}, last_update=1.0, last_cookie_update=2.0)
        document = json.loads(encode_record(record))
        assert document == {"version": SCHEMA_VERSION, "last_update": 1.0, "last_cookie_update": 2.0, "value": {"k": "v"}}

    def test_unserializable_value(self):
        record = SessionRecord("abc", {"s": {1, 2}}, last_update=1.0, last_cookie_update=1.0)
        with pytest.raises(SerializationError):
            encode_record(record)

    def test_nan_is_rejected(self):
        record = SessionRecord("abc", {"n": float("nan")}, last_update=1.0, last_cookie_update=1.0)
        with pytest.raises(SerializationError):
            encode_record(record)

    def test_tuple_is_rejected_instead_of_becoming_a_list(self):
        record = SessionRecord("abc", {"t": (1, 2)}, last_update=1.0, last_cookie_update=1.0)
        with pytest.raises(SerializationError) as exc_info:
            encode_record(record)
        assert exc_info.value.code == "SESSION_ENCODE"

    def test_non_string_key_is_rejected(self):
        record = SessionRecord("abc", {"scores": {1: "gold"}}, last_update=1.0, last_cookie_update=1.0)
        with pytest.raises(SerializationError):
            encode_record(record)


class TestDecodeRejects:
    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"\xff\xfe",
            b"[]",
            b'{"version": 2, "last_update": 1, "last_cookie_update": 1, "value": {}}',
            b'{"version": 1, "last_update": 1, "last_cookie_update": 1, "value": []}',
            b'{"version": 1, "last_update": "yesterday", "last_cookie_update": 1, "value": {}}',
            b'{"version": 1, "last_update": true, "last_cookie_update": 1, "value": {}}',
            b'{"version": 1, "last_update": 1, "value": {}}',
        ],
    )
    def test_malformed_payload(self, raw):
        with pytest.raises(SerializationError):
            decode_payload(raw)

    def test_integer_timestamps_are_accepted(self):
        stored = decode_payload(b'{"version": 1, "last_update": 5, "last_cookie_update": 4, "value": {}}')
        assert stored.last_update == 5.0
        assert isinstance(stored.last_update, float)
