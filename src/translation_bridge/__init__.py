"""Translation Bridge.

Lets clients that speak the chat-completion wire protocol (message-list and
structured-input variants, optionally streamed over Server-Sent Events) talk
to a translation engine with a different event taxonomy and usage shape.

Version Management
------------------
``__version__`` is read from the installed package metadata at import time.
The single source of truth is the ``version`` field in ``pyproject.toml``.
``api/server.py`` and the root endpoint import ``__version__`` from here.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("translation_bridge")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
