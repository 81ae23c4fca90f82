import logging

from strict_type_args.core.diagnostics import DiagnosticIndex, load_diagnostic_index
from strict_type_args.models import MatchStrategy

logger = logging.getLogger(__name__)


class ReportCache:
    """Memoize one DiagnosticIndex per (report path, match strategy).

    Entries live until invalidated. A report rewritten on disk under the same
    path is not noticed.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str | None, MatchStrategy], DiagnosticIndex] = {}

    def get(
        self,
        report_path: str | None,
        strategy: MatchStrategy = MatchStrategy.BASENAME,
    ) -> DiagnosticIndex:
        key = (report_path, strategy)
        index = self._entries.get(key)
        if index is None:
            index = load_diagnostic_index(report_path, strategy)
            self._entries[key] = index
        return index

    def invalidate(self, report_path: str | None = None) -> None:
        if report_path is None:
            self._entries.clear()
            return
        for key in [key for key in self._entries if key[0] == report_path]:
            del self._entries[key]
        logger.debug("Invalidated cached report %s", report_path)

    def __contains__(self, report_path: object) -> bool:
        return any(key[0] == report_path for key in self._entries)

    def __len__(self) -> int:
        return len(self._entries)


# Shared by callers that do not pass their own cache, so repeated
# transform() calls in one process load each report once.
DEFAULT_REPORT_CACHE = ReportCache()
