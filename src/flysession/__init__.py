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
"""flysession — session middleware for ASGI applications.

Quick start::

    from starlette.applications import Starlette

    from flysession.core import Config
    from flysession.session.auto_configuration import install_session_middleware
    from flysession.web.adapters.starlette import get_session

    app = Starlette(routes=[...])
    manager = install_session_middleware(app, Config.from_file("flysession.yaml"))

    async def profile(request):
        session = get_session(request)
        session.set_attribute("user", 42)
"""

__version__ = "0.1.0"
