import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from strict_type_args.core.cache import DEFAULT_REPORT_CACHE, ReportCache
from strict_type_args.core.languages import is_supported_file
from strict_type_args.core.transform import transform_file
from strict_type_args.models import TransformOptions

logger = logging.getLogger(__name__)

DEFAULT_IGNORED_DIRS = ("node_modules",)


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    status: str
    rewritten: int = 0


def collect_source_files(paths: Iterable[str | Path], ignore: Iterable[str] = DEFAULT_IGNORED_DIRS) -> Iterator[Path]:
    """Yield supported source files under the given files and directories."""
    ignored = set(ignore)
    for entry in paths:
        path = Path(entry)
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if ignored.intersection(candidate.relative_to(path).parts):
                    continue
                if candidate.is_file() and is_supported_file(candidate):
                    yield candidate
        elif path.is_file():
            yield path
        else:
            logger.warning("Skipping missing path %s", path)


def run_transform(
    paths: Iterable[str | Path],
    options: TransformOptions,
    cache: ReportCache | None = None,
    dry_run: bool = False,
    ignore: Iterable[str] = DEFAULT_IGNORED_DIRS,
) -> list[FileOutcome]:
    """Rewrite every source file under *paths*, one at a time.

    Returns one outcome per file visited. Changed files are written back
    unless *dry_run* is set.
    """
    if cache is None:
        cache = DEFAULT_REPORT_CACHE
    outcomes: list[FileOutcome] = []
    for file_path in collect_source_files(paths, ignore):
        try:
            source = file_path.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable file %s: %s", file_path, exc)
            outcomes.append(FileOutcome(path=file_path, status="error"))
            continue

        result = transform_file(str(file_path), source, options, cache=cache)
        if result.source is None:
            outcomes.append(FileOutcome(path=file_path, status="unchanged"))
            continue

        if not dry_run:
            file_path.write_bytes(result.source.encode("utf-8"))
        logger.info("Rewrote %d type reference(s) in %s", result.rewritten, file_path)
        outcomes.append(FileOutcome(path=file_path, status="rewritten", rewritten=result.rewritten))
    return outcomes
