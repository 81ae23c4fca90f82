import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

from strict_type_args.core.diagnostics import DiagnosticIndex
from strict_type_args.core.ports.syntax import SyntaxBackend, SyntaxTree
from strict_type_args.models import ArityErrorRecord, TransformOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteResult:
    source: str | None
    rewritten: int = 0

    @property
    def changed(self) -> bool:
        return self.source is not None


NO_CHANGE = RewriteResult(source=None)


def is_eligible(file_path: str, source: str, index: DiagnosticIndex, options: TransformOptions) -> bool:
    """Decide whether a file is worth parsing at all."""
    if options.generated_marker and options.generated_marker in source:
        return False
    file_name = PurePath(file_path.replace("\\", "/")).name
    declaration = any(file_name.endswith(suffix) for suffix in options.declaration_suffixes)
    if not declaration and options.opt_in_marker not in source:
        return False
    return index.has_records(file_path)


def _within_type_of(tree: SyntaxTree, node: Any) -> bool:
    return any(tree.is_type_of(ancestor) for ancestor in tree.ancestors(node))


def _find_record(records: Sequence[ArityErrorRecord], span: tuple[int, int]) -> ArityErrorRecord | None:
    # Files sharing a file key share records; the first span match stands in for all of them.
    start, end = span
    for record in records:
        if record.start_offset == start and record.end_offset == end:
            return record
    return None


def rewrite_type_arguments(
    file_path: str,
    source: str,
    index: DiagnosticIndex,
    backend: SyntaxBackend,
    options: TransformOptions,
) -> RewriteResult:
    """Add placeholder type arguments wherever the index reports an arity error.

    Only type references without explicit arguments whose span exactly
    matches a record are touched. References inside a ``typeof`` are value
    references and are left alone.
    """
    if not is_eligible(file_path, source, index, options):
        return NO_CHANGE

    records = index.records_for(file_path)
    tree = backend.parse(source)
    rewritten = 0
    for node in tree.type_applications():
        if _within_type_of(tree, node):
            continue
        if tree.has_type_arguments(node):
            continue
        name = tree.name_reference(node)
        if name is None:
            continue
        record = _find_record(records, tree.span(node))
        if record is None:
            continue
        arguments = [tree.placeholder_type() for _ in range(record.required_arity)]
        tree.replace(node, tree.type_application(node, arguments))
        rewritten += 1
        logger.debug(
            "%s: %s at %d:%d given %d type argument(s)",
            file_path,
            name,
            record.start_offset,
            record.end_offset,
            record.required_arity,
        )

    if rewritten == 0:
        return NO_CHANGE
    return RewriteResult(source=tree.to_source(), rewritten=rewritten)
