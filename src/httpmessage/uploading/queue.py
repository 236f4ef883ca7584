"""
=============================================================================
STRATEGIES QUEUE
=============================================================================

A queue is itself an upload strategy: it holds other strategies keyed by
an integer priority and runs them highest priority first.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                       QUEUE EXECUTION                               │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   attach(DirectoryStrategy(), 200)                                  │
    │   attach(MoveStrategy(), 100)                                       │
    │                                                                      │
    │   queue(file, target)                                                │
    │       │                                                              │
    │       ├──► [200] DirectoryStrategy ── state & BREAK? ── yes ──► stop │
    │       │                                   │                          │
    │       │                                   no                         │
    │       └──► [100] MoveStrategy ─────────────┘                         │
    │                                                                      │
    │   queue.state / operation_error  ← last strategy that ran           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
OPTION PROPAGATION
=============================================================================

Options flow both ways between a queue and members that have none:

    queue.set_options(opts)     members without options receive ``opts``
    queue.attach(s, priority)   ``s`` receives the queue's options if it
                                has none of its own

Members configured separately keep their own options. An empty
UploadOptions still counts as configured.

=============================================================================
"""

from typing import TYPE_CHECKING, Dict, List, Optional
import logging

from ..exceptions import QueueLockedError
from .base import State, UploadStrategy
from .options import UploadOptions
from .target import UploadTarget

if TYPE_CHECKING:
    from ..http.uploaded_file import UploadedFile


logger = logging.getLogger(__name__)


class StrategiesQueue(UploadStrategy):
    """
    Priority ordered composite of upload strategies.

    Usage:
        queue = StrategiesQueue()
        queue.attach(DirectoryStrategy(), 200).attach(MoveStrategy(), 100)
        queue.set_options(UploadOptions({"target_directory": "/var/uploads"}))
        queue(uploaded_file, UploadTarget("avatar.png"))
    """

    def __init__(self):
        self._queue: Dict[int, UploadStrategy] = {}
        self._sorted: Optional[List[UploadStrategy]] = None
        self._options: Optional[UploadOptions] = None
        self._started = False
        self._current: Optional[UploadStrategy] = None

    # =========================================================================
    # MEMBERS
    # =========================================================================

    def attach(self, strategy: UploadStrategy, priority: int) -> "StrategiesQueue":
        """
        Add a strategy at the given priority.

        Args:
            strategy: The strategy to run.
            priority: Unique priority; higher runs first.

        Returns:
            Self for method chaining

        Raises:
            QueueLockedError: If the queue is running.
            ValueError: If the priority is already taken.
        """
        if self._started:
            raise QueueLockedError()
        if priority in self._queue:
            raise ValueError(f'Strategy with priority "{priority}" already exists.')

        self._queue[priority] = strategy
        self._sorted = None

        if self._options is not None and strategy.options is None:
            strategy.set_options(self._options)

        logger.debug(f"Attached {strategy.name} at priority {priority}")
        return self

    def detach(self, priority: int) -> "StrategiesQueue":
        """Remove the strategy at ``priority``; unknown priorities are ignored."""
        if self._started:
            raise QueueLockedError()

        strategy = self._queue.pop(priority, None)
        if strategy is not None:
            self._sorted = None
            logger.debug(f"Detached {strategy.name} from priority {priority}")
        return self

    def get_array_copy(self) -> Dict[int, UploadStrategy]:
        return dict(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    # =========================================================================
    # OPTIONS
    # =========================================================================

    def set_options(self, options: UploadOptions) -> None:
        if not isinstance(options, UploadOptions):
            raise TypeError(
                f'Invalid options provided; must be an UploadOptions, '
                f'"{type(options).__name__}" received.'
            )
        for strategy in self._queue.values():
            if strategy.options is None:
                strategy.set_options(options)
        self._options = options

    @property
    def options(self) -> Optional[UploadOptions]:
        return self._options

    # =========================================================================
    # EXECUTION
    # =========================================================================

    def __call__(self, file: "UploadedFile", target: UploadTarget) -> None:
        if self._sorted is None:
            self._sorted = [
                self._queue[priority]
                for priority in sorted(self._queue, reverse=True)
            ]

        self._started = True
        self._current = None
        try:
            for strategy in self._sorted:
                self._current = strategy
                strategy(file, target)
                if strategy.state is not None and strategy.state & State.BREAK:
                    logger.debug(f"{strategy.name} stopped the queue")
                    break
        finally:
            self._started = False

    # =========================================================================
    # STATE (of the last strategy that ran)
    # =========================================================================

    @property
    def state(self) -> Optional[State]:
        if self._current is None:
            return None
        return self._current.state

    def has_operation_error(self) -> bool:
        if self._current is None:
            return False
        return self._current.has_operation_error()

    @property
    def operation_error(self) -> Optional[str]:
        if self._current is None:
            return None
        return self._current.operation_error

    @property
    def operation_error_description(self) -> Optional[str]:
        if self._current is None:
            return None
        return self._current.operation_error_description
