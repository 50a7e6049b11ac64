"""
Error handling policies for DazzleScan collectors.

The engine always streams every directory failure. A collector that turns
the stream into a single answer hands each failure to a policy, which
decides what to remember and what single error to surface at the end.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .._common.errors import ScanError

logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for error handling policies.

    Subclasses implement different strategies for absorbing the
    failures a scan reports.
    """

    @abstractmethod
    def handle(self, error: ScanError) -> None:
        """
        Observe one failure reported by the scan.

        Args:
            error: The failure taken from the error conduit

        Raises:
            Any exception to signal that the collector should give up
            once the scan has been drained.
        """
        pass

    @abstractmethod
    def result(self) -> Optional[ScanError]:
        """
        The error to surface once the scan has finished.

        Returns:
            A ScanError, or None if nothing should be reported
        """
        pass

    def reset(self) -> None:
        """Forget everything observed so far."""


class FirstErrorPolicy(ErrorPolicy):
    """
    Policy that surfaces the first failure observed and absorbs the rest.

    This is the default behavior of the synchronous collector.
    """

    def __init__(self):
        self.first: Optional[ScanError] = None
        self.absorbed = 0

    def handle(self, error: ScanError) -> None:
        """Keep the first error, count the others."""
        if self.first is None:
            self.first = error
        else:
            self.absorbed += 1

    def result(self) -> Optional[ScanError]:
        return self.first

    def reset(self) -> None:
        self.first = None
        self.absorbed = 0


class CollectErrorsPolicy(ErrorPolicy):
    """
    Policy that keeps every failure for later inspection.

    The surfaced error is still the first one; the full list is available
    in ``errors``.
    """

    def __init__(self):
        """Initialize the policy."""
        self.errors: List[ScanError] = []
        self.skipped_paths: List[str] = []

    def handle(self, error: ScanError) -> None:
        """Silently collect the error."""
        self._record(error)

    def _record(self, error: ScanError) -> None:
        self.errors.append(error)
        if isinstance(error.cause, PermissionError):
            self.skipped_paths.append(error.path)

    def result(self) -> Optional[ScanError]:
        return self.errors[0] if self.errors else None

    def reset(self) -> None:
        self.errors = []
        self.skipped_paths = []

    def get_statistics(self) -> Dict[str, Any]:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'permission_errors': sum(1 for e in self.errors if isinstance(e.cause, PermissionError)),
            'missing_paths': sum(1 for e in self.errors if isinstance(e.cause, FileNotFoundError)),
            'not_directories': sum(1 for e in self.errors if isinstance(e.cause, NotADirectoryError)),
            'skipped_paths': len(self.skipped_paths),
            'errors': [
                {'path': e.path, 'error_type': e.cause_type, 'error_message': e.strerror}
                for e in self.errors
            ],
        }


class ContinueOnErrorsPolicy(CollectErrorsPolicy):
    """
    Policy that logs each failure as a warning and keeps going.

    Useful when you want to process as much as possible and still see
    what was skipped.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for each failure
        """
        super().__init__()
        self.verbose = verbose

    def handle(self, error: ScanError) -> None:
        self._record(error)
        if not self.verbose:
            return
        if isinstance(error.cause, PermissionError):
            logger.warning("Skipping inaccessible path '%s': %s", error.path, error.strerror)
        else:
            logger.warning("Error scanning '%s': %s", error.path, error.strerror)


class ThresholdPolicy(CollectErrorsPolicy):
    """
    Policy that tolerates failures up to a threshold, then gives up.

    Useful when some failures are expected but too many indicate
    a systemic problem.
    """

    def __init__(self, max_errors: int = 10):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum failures to tolerate
        """
        super().__init__()
        self.max_errors = max_errors

    def handle(self, error: ScanError) -> None:
        """Record the error; raise once the threshold is exceeded."""
        self._record(error)
        if len(self.errors) > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error
