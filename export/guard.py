"""Re-entrancy guard for the export flow.

The guard is an explicit token owned by whoever drives exports (one per
page or per session), not process-wide state.  It is always released on
exit, whether the export succeeded or not.
"""

from __future__ import annotations


class ExportInProgressError(RuntimeError):
    """Raised when an export starts while another one holds the guard."""


class ExportGuard:
    """Context manager that admits one export at a time.

    Usage::

        guard = ExportGuard()
        with guard:
            run_export()
    """

    def __init__(self) -> None:
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def __enter__(self) -> ExportGuard:
        if self._active:
            raise ExportInProgressError("an export is already running")
        self._active = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self._active = False

    async def __aenter__(self) -> ExportGuard:
        return self.__enter__()

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.__exit__(exc_type, exc, tb)
