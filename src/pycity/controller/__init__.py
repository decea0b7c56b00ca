"""Controller layer for pycity.

Runs layout calculations for interactive hosts without blocking
their event loop.
"""

from pycity.controller.worker import LayoutRunner, LayoutWorker

__all__ = ["LayoutRunner", "LayoutWorker"]
