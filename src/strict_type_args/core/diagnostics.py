import logging
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from types import MappingProxyType

from pydantic import ValidationError

from strict_type_args.models import ArityErrorRecord, FlowError, FlowMessage, FlowReport, MatchStrategy

logger = logging.getLogger(__name__)

_ARITY_PATTERN = re.compile(r"Application of polymorphic type needs <list of (\d+)")
_LEADING_DIRS = re.compile(r"^.*[\\/]")


def match_arity(description: str) -> int | None:
    """Extract the required type argument count from a Flow error description.

    Returns None when the text is not an arity error.
    """
    match = _ARITY_PATTERN.search(description)
    return int(match.group(1)) if match else None


def file_key(path: str, strategy: MatchStrategy = MatchStrategy.BASENAME) -> str:
    if strategy is MatchStrategy.PATH:
        return Path(path.replace("\\", "/")).resolve().as_posix()
    return _LEADING_DIRS.sub("", path)


def record_from_messages(messages: Sequence[FlowMessage]) -> ArityErrorRecord | None:
    if len(messages) < 2:
        return None
    arity = match_arity(messages[1].descr)
    if arity is None:
        return None
    head = messages[0]
    if head.path is None or head.loc is None:
        return None
    return ArityErrorRecord(
        source_path=head.path,
        start_offset=head.loc.start.offset,
        end_offset=head.loc.end.offset,
        required_arity=arity,
    )


class DiagnosticIndex:
    """Arity error records grouped by file key, in report order."""

    def __init__(
        self,
        records: Mapping[str, Sequence[ArityErrorRecord]] | None = None,
        strategy: MatchStrategy = MatchStrategy.BASENAME,
        total_entries: int = 0,
    ) -> None:
        frozen = {key: tuple(values) for key, values in (records or {}).items() if values}
        self._records: Mapping[str, tuple[ArityErrorRecord, ...]] = MappingProxyType(frozen)
        self.strategy = strategy
        self.total_entries = total_entries

    @classmethod
    def empty(cls, strategy: MatchStrategy = MatchStrategy.BASENAME) -> "DiagnosticIndex":
        return cls(strategy=strategy)

    def records_for(self, file_path: str) -> tuple[ArityErrorRecord, ...]:
        return self._records.get(file_key(file_path, self.strategy), ())

    def has_records(self, file_path: str) -> bool:
        return file_key(file_path, self.strategy) in self._records

    def files(self) -> list[str]:
        return list(self._records)

    def __len__(self) -> int:
        return sum(len(records) for records in self._records.values())


def load_diagnostic_index(
    report_path: str | None,
    strategy: MatchStrategy = MatchStrategy.BASENAME,
) -> DiagnosticIndex:
    """Build an index of arity errors from a Flow JSON report.

    Never raises: an absent, unreadable or malformed report yields an empty
    index, so every file becomes ineligible for rewriting.
    """
    if not report_path:
        logger.info("No error report specified")
        return DiagnosticIndex.empty(strategy)

    try:
        report = FlowReport.model_validate_json(Path(report_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Failed to load arity errors from %s: %s", report_path, exc)
        return DiagnosticIndex.empty(strategy)

    grouped: dict[str, list[ArityErrorRecord]] = {}
    for entry in report.errors:
        try:
            error = FlowError.model_validate(entry)
        except ValidationError:
            continue
        record = record_from_messages(error.message)
        if record is None:
            continue
        grouped.setdefault(file_key(record.source_path, strategy), []).append(record)

    index = DiagnosticIndex(grouped, strategy=strategy, total_entries=len(report.errors))
    logger.info(
        "Loaded %d arity errors (of %d total) from %s",
        len(index),
        index.total_entries,
        report_path,
    )
    return index
