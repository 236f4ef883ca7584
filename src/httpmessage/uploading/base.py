"""
=============================================================================
BASE UPLOAD STRATEGY INTERFACE
=============================================================================

Defines the upload strategy protocol and the shared state machine every
concrete strategy builds on.

=============================================================================
STRATEGY PATTERN
=============================================================================

Relocating an uploaded file is split into small, independent steps. Each
step is a strategy: a callable object configured with options and invoked
with the file and its target name.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    UPLOAD STRATEGY CONTRACT                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   strategy.set_options(options)     configure (target dir, modes)   │
    │                                                                      │
    │   strategy(file, target)            do the work                     │
    │                                                                      │
    │   strategy.state                    SUCCESS / FAILURE / BREAK       │
    │   strategy.operation_error          "create-directory-failed" ...   │
    │   strategy.operation_error_description                              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STATE FLAGS
=============================================================================

    SUCCESS  0b00   the step went fine, continue
    FAILURE  0b01   the step failed
    BREAK    0b10   stop the pipeline after this step

Flags combine. A failing step reports FAILURE | BREAK: record the error
and stop. A queue only looks at BREAK to decide whether to go on.

Operational problems (missing directory, failed rename) are NEVER raised.
They are recorded as (state, error code, description) and the caller
inspects them after the call.

=============================================================================
"""

from abc import ABC, abstractmethod
from enum import IntFlag
from typing import TYPE_CHECKING, Dict, Optional
import logging

from ..exceptions import UnknownOperationError
from .options import UploadOptions
from .target import UploadTarget

if TYPE_CHECKING:
    from ..http.uploaded_file import UploadedFile


logger = logging.getLogger(__name__)


class State(IntFlag):
    """Outcome flags of an upload strategy."""

    SUCCESS = 0b00
    FAILURE = 0b01
    BREAK = 0b10


class UploadStrategy(ABC):
    """
    Abstract upload strategy.

    Implementations are callables: ``strategy(file, target)``.
    """

    @abstractmethod
    def set_options(self, options: UploadOptions) -> None:
        """Configure the strategy."""

    @property
    @abstractmethod
    def options(self) -> Optional[UploadOptions]:
        """The options last given to set_options(), or None."""

    @abstractmethod
    def __call__(self, file: "UploadedFile", target: UploadTarget) -> None:
        """Process the uploaded file."""

    @property
    @abstractmethod
    def state(self) -> Optional[State]:
        """State of the last invocation, None before the first one."""

    @abstractmethod
    def has_operation_error(self) -> bool:
        """True if the last invocation failed."""

    @property
    @abstractmethod
    def operation_error(self) -> Optional[str]:
        """Error code of the last invocation, None on success."""

    @property
    @abstractmethod
    def operation_error_description(self) -> Optional[str]:
        """Human readable description of the last error."""

    @property
    def name(self) -> str:
        """Get the strategy name for logging."""
        return self.__class__.__name__


class AbstractUploadStrategy(UploadStrategy):
    """
    Shared state keeping for concrete strategies.

    =========================================================================
    WRITING A STRATEGY
    =========================================================================

        class VirusScanStrategy(AbstractUploadStrategy):
            INFECTED = "infected"

            errors = {INFECTED: "The uploaded file is infected."}

            def apply_options(self, options):
                self.engine = options.get("scan_engine", "clamav")

            def __call__(self, file, target):
                if self._scan(file.temp_name):
                    self.decide_on_failure(self.INFECTED)
                    return
                self.decide_on_success()

    Every code passed to decide_on_failure() MUST be a key of ``errors``.

    =========================================================================
    """

    # Error code -> description. Concrete strategies override this.
    errors: Dict[str, str] = {}

    def __init__(self):
        self._state: Optional[State] = None
        self._operation_error: Optional[str] = None
        self._operation_error_description: Optional[str] = None
        self._options: Optional[UploadOptions] = None

    # =========================================================================
    # OPTIONS
    # =========================================================================

    def set_options(self, options: UploadOptions) -> None:
        """
        Configure the strategy from an options bag.

        Recognised keys are applied by apply_options(); the bag itself is
        remembered so a queue can tell configured strategies apart.
        """
        if not isinstance(options, UploadOptions):
            raise TypeError(
                f'Invalid options provided; must be an UploadOptions, '
                f'"{type(options).__name__}" received.'
            )
        self.apply_options(options)
        self._options = options

    def apply_options(self, options: UploadOptions) -> None:
        """Pick recognised keys out of ``options``. Ignores everything by default."""

    @property
    def options(self) -> Optional[UploadOptions]:
        return self._options

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> Optional[State]:
        return self._state

    def has_operation_error(self) -> bool:
        return bool(self._state is not None and self._state & State.FAILURE)

    @property
    def operation_error(self) -> Optional[str]:
        return self._operation_error

    @property
    def operation_error_description(self) -> Optional[str]:
        return self._operation_error_description

    def decide_on_failure(self, error: str, description: Optional[str] = None) -> None:
        """
        Record a failure and ask the pipeline to stop.

        Args:
            error: Error code; must be a key of ``errors``.
            description: Overrides the table description for this call,
                         e.g. with the text of an OSError.

        Raises:
            UnknownOperationError: If ``error`` is not in ``errors``.
        """
        if error not in self.errors:
            raise UnknownOperationError(error)

        self._state = State.FAILURE | State.BREAK
        self._operation_error = error
        self._operation_error_description = description or self.errors[error]

        logger.warning(f"{self.name} failed: {error} ({self._operation_error_description})")

    def decide_on_success(self) -> None:
        """Record a success and clear any previous error."""
        self._state = State.SUCCESS
        self._operation_error = None
        self._operation_error_description = None
