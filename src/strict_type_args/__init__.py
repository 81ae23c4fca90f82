from strict_type_args.core.cache import DEFAULT_REPORT_CACHE, ReportCache
from strict_type_args.core.diagnostics import DiagnosticIndex, load_diagnostic_index, match_arity
from strict_type_args.core.transform import transform, transform_file
from strict_type_args.models import ArityErrorRecord, MatchStrategy, TransformOptions

__all__ = [
    "DEFAULT_REPORT_CACHE",
    "ArityErrorRecord",
    "DiagnosticIndex",
    "MatchStrategy",
    "ReportCache",
    "TransformOptions",
    "load_diagnostic_index",
    "match_arity",
    "transform",
    "transform_file",
]
