import logging
from pathlib import Path

from strict_type_args.core.cache import DEFAULT_REPORT_CACHE, ReportCache
from strict_type_args.core.languages import resolve_language
from strict_type_args.core.ports.syntax import SyntaxBackend
from strict_type_args.core.rewrite import NO_CHANGE, RewriteResult, rewrite_type_arguments
from strict_type_args.models import TransformOptions
from strict_type_args.syntax.tree_sitter_adapter import TreeSitterBackend

logger = logging.getLogger(__name__)


def transform_file(
    file_path: str,
    source: str,
    options: TransformOptions,
    cache: ReportCache | None = None,
    backend: SyntaxBackend | None = None,
) -> RewriteResult:
    """Rewrite one file, reporting how many type references changed.

    Without an explicit ``cache`` the process-wide ``DEFAULT_REPORT_CACHE`` is
    used. Failures never propagate: they are logged and reported as no change.
    """
    if cache is None:
        cache = DEFAULT_REPORT_CACHE
    try:
        index = cache.get(options.errors, options.match)
        if not index.has_records(file_path):
            return NO_CHANGE
        if backend is None:
            try:
                language = resolve_language(options.language, Path(file_path))
            except ValueError as exc:
                logger.warning("Skipping %s: %s", file_path, exc)
                return NO_CHANGE
            backend = TreeSitterBackend(language, placeholder=options.placeholder)
        return rewrite_type_arguments(file_path, source, index, backend, options)
    except Exception:
        logger.exception("Error while rewriting %s", file_path)
        return NO_CHANGE


def transform(
    file_path: str,
    source: str,
    options: TransformOptions,
    cache: ReportCache | None = None,
    backend: SyntaxBackend | None = None,
) -> str | None:
    """Return the rewritten source of a file, or None when nothing changed."""
    return transform_file(file_path, source, options, cache=cache, backend=backend).source
