"""
CLI layer for kuberun.

All launch logic lives in :mod:`kuberun.launch`; this package handles only
terminal transport: argument parsing, settings wiring and error output.

Entry point::

    kuberun --help
"""

from kuberun.cli.app import app

__all__ = ["app"]
