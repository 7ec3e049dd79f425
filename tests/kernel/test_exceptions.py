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
"""Tests for the flysession exception hierarchy."""

from flysession.kernel.exceptions import (
    AllocationError,
    FlySessionException,
    InfrastructureException,
    SerializationError,
    SessionException,
    StoreError,
)


class TestFlySessionException:
    def test_basic_creation(self):
        exc = FlySessionException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = StoreError("redis down", code="SESSION_STORE", context={"operation": "get"})
        assert exc.code == "SESSION_STORE"
        assert exc.context["operation"] == "get"

    def test_context_defaults_to_empty_dict(self):
        exc = FlySessionException("test")
        exc.context["key"] = "value"
        assert FlySessionException("test2").context == {}


class TestExceptionHierarchy:
    def test_session_errors(self):
        assert issubclass(SessionException, FlySessionException)
        assert issubclass(AllocationError, SessionException)
        assert issubclass(SerializationError, SessionException)

    def test_store_error_is_infrastructure(self):
        assert issubclass(StoreError, InfrastructureException)
        assert issubclass(InfrastructureException, FlySessionException)
        assert not issubclass(StoreError, SessionException)
