"""Background layout calculation using QThread."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from PyQt6.QtCore import QThread, pyqtSignal

from pycity.layout.config import LayoutConfig
from pycity.layout.engine import LayoutEngine, LayoutResult
from pycity.model.node import TreeNode

logger = logging.getLogger(__name__)


class LayoutWorker(QThread):
    """Worker thread running one layout calculation off the UI thread."""

    # Signals
    finished = pyqtSignal(object)  # Emits LayoutResult when complete
    error = pyqtSignal(str)  # Emits error messages

    def __init__(
        self,
        root: TreeNode | Mapping[str, Any] | None,
        config: LayoutConfig | None = None,
    ) -> None:
        """Initialize the layout worker.

        Args:
            root: Tree to lay out
            config: Layout configuration (uses defaults if None)
        """
        super().__init__()
        self.root = root
        self.config = config or LayoutConfig()
        self.result: LayoutResult | None = None

    def run(self) -> None:
        """Run the layout calculation."""
        try:
            self.result = LayoutEngine(self.config).calculate_layout(self.root)
        except Exception as e:
            logger.error(f"Layout failed: {e}")
            self.error.emit(f"Layout failed: {e}")
            return
        self.finished.emit(self.result)


class LayoutRunner:
    """High-level layout interface for interactive hosts."""

    def __init__(self, config: LayoutConfig | None = None) -> None:
        """Initialize the runner.

        Args:
            config: Layout configuration (uses defaults if None)
        """
        self.config = config or LayoutConfig()
        self._worker: LayoutWorker | None = None

    def run(self, root: TreeNode | Mapping[str, Any] | None) -> LayoutResult:
        """Synchronously calculate a layout.

        Args:
            root: Tree to lay out

        Returns:
            The layout result
        """
        return LayoutEngine(self.config).calculate_layout(root)

    def run_async(
        self,
        root: TreeNode | Mapping[str, Any] | None,
        on_finished: Callable[[LayoutResult], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> LayoutWorker:
        """Asynchronously calculate a layout.

        A running calculation is waited for before the new one starts.

        Args:
            root: Tree to lay out
            on_finished: Callback with the result when the layout is done
            on_error: Callback for errors

        Returns:
            The layout worker thread
        """
        self.wait()
        self._worker = LayoutWorker(root, self.config)

        if on_finished is not None:
            self._worker.finished.connect(on_finished)
        if on_error is not None:
            self._worker.error.connect(on_error)

        self._worker.start()
        return self._worker

    def wait(self) -> None:
        """Block until any ongoing calculation has finished."""
        if self._worker is not None:
            self._worker.wait()

    @property
    def is_running(self) -> bool:
        """Check if a calculation is in progress."""
        return self._worker is not None and self._worker.isRunning()
