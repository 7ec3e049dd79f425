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
"""Stored session format.

A session is written to the store as a UTF-8 JSON object::

    {"version": 1, "last_update": 1700000000.0,
     "last_cookie_update": 1700000000.0, "value": {...}}

``value`` must survive a JSON round trip unchanged.  Values that would come
back different, such as tuples or non-string keys, are rejected on encode.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any

from flysession.kernel.exceptions import SerializationError
from flysession.session.record import SessionRecord

SCHEMA_VERSION = 1


@dataclass(frozen=True)
class StoredSession:
    last_update: float
    last_cookie_update: float
    value: dict[str, Any]


def encode_record(record: SessionRecord) -> bytes:
    """Serialize *record* for the store."""
    document = {
        "version": SCHEMA_VERSION,
        "last_update": record.last_update,
        "last_cookie_update": record.last_cookie_update,
        "value": record.value,
    }
    try:
        encoded = json.dumps(document, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            f"Session value is not JSON-serializable: {exc}",
            code="SESSION_ENCODE",
            context={"session_id": record.id},
        ) from exc

    if json.loads(encoded)["value"] != record.value:
        raise SerializationError(
            "Session value does not survive a JSON round trip",
            code="SESSION_ENCODE",
            context={"session_id": record.id},
        )
    return encoded.encode()


def decode_payload(raw: bytes) -> StoredSession:
    """Parse a stored payload, raising :class:`SerializationError` on any defect."""
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise SerializationError(f"Stored session is not valid JSON: {exc}", code="SESSION_DECODE") from exc

    if not isinstance(document, dict):
        raise SerializationError("Stored session is not a JSON object", code="SESSION_DECODE")

    version = document.get("version")
    if version != SCHEMA_VERSION:
        raise SerializationError(
            f"Unsupported session schema version {version!r}",
            code="SESSION_DECODE",
            context={"version": version},
        )

    value = document.get("value")
    if not isinstance(value, dict):
        raise SerializationError("Stored session value is not an object", code="SESSION_DECODE")

    return StoredSession(
        last_update=_timestamp(document, "last_update"),
        last_cookie_update=_timestamp(document, "last_cookie_update"),
        value=value,
    )


def _timestamp(document: dict[str, Any], name: str) -> float:
    stamp = document.get(name)
    if isinstance(stamp, bool) or not isinstance(stamp, (int, float)) or not math.isfinite(stamp):
        raise SerializationError(f"Stored session has no valid '{name}'", code="SESSION_DECODE")
    return float(stamp)
