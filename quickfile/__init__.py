"""Public package surface for quickfile.

Exports ``main`` (interactive launcher) and ``client_main`` (one-shot client)
for programmatic CLI invocation. Implementation lives in submodules.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def client_main(*args, **kwargs):
    """Lazily import the one-shot client entrypoint."""
    from .cli import client_main as _client_main

    return _client_main(*args, **kwargs)


__all__ = ["client_main", "main"]
