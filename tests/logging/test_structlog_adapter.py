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
"""Tests for StructlogAdapter."""

import logging

import pytest

from flysession.core.config import Config
from flysession.logging.structlog_adapter import StructlogAdapter


class TestStructlogAdapterConfigure:
    def test_configure_with_defaults(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        assert adapter._root_level == "INFO"
        assert adapter._format == "console"

    def test_configure_reads_root_level(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"flysession": {"logging": {"level": {"root": "debug"}}}}))
        assert adapter._root_level == "DEBUG"

    def test_configure_reads_json_format(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({"flysession": {"logging": {"format": "JSON"}}}))
        assert adapter._format == "json"

    def test_configure_rejects_unknown_format(self):
        with pytest.raises(ValueError):
            StructlogAdapter().configure(Config({"flysession": {"logging": {"format": "xml"}}}))

    def test_per_module_levels_are_applied(self):
        adapter = StructlogAdapter()
        config = Config({"flysession": {"logging": {"level": {"root": "INFO", "flysession.session": "DEBUG"}}}})
        adapter.configure(config)
        assert adapter._module_levels == {"flysession.session": "DEBUG"}
        assert logging.getLogger("flysession.session").level == logging.DEBUG


class TestStructlogAdapterLoggers:
    def test_get_logger_returns_event_logger(self):
        adapter = StructlogAdapter()
        adapter.configure(Config({}))
        logger = adapter.get_logger("flysession.session")
        assert callable(getattr(logger, "info", None))
        assert callable(getattr(logger, "warning", None))

    def test_set_level(self):
        adapter = StructlogAdapter()
        adapter.set_level("flysession.web", "warning")
        assert logging.getLogger("flysession.web").level == logging.WARNING
