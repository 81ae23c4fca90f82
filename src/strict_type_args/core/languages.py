from pathlib import Path

# tree-sitter grammar -> names and file extensions that select it.
# Flow annotations are closest to TypeScript; plain JavaScript files may hold JSX.
_GRAMMARS: dict[str, tuple[frozenset[str], frozenset[str]]] = {
    "tsx": (
        frozenset({"flow", "javascript", "js", "jsx", "tsx"}),
        frozenset({".cjs", ".js", ".jsx", ".mjs", ".tsx"}),
    ),
    "typescript": (
        frozenset({"ts", "typescript"}),
        frozenset({".flow", ".ts"}),
    ),
}

_BY_NAME = {name: grammar for grammar, (names, _) in _GRAMMARS.items() for name in names}
_BY_EXTENSION = {suffix: grammar for grammar, (_, suffixes) in _GRAMMARS.items() for suffix in suffixes}


def normalize_language(language: str) -> str:
    """Map a language name, or an extension such as ``.js``, to a grammar."""
    key = language.strip().lower()
    grammar = _BY_EXTENSION.get(key) if key.startswith(".") else _BY_NAME.get(key)
    if grammar is None:
        raise ValueError(f"Unsupported language '{language}'. Choose one of: {', '.join(sorted(_BY_NAME))}")
    return grammar


def detect_language_from_path(file_path: Path) -> str:
    grammar = _BY_EXTENSION.get(file_path.suffix.lower())
    if grammar is None:
        raise ValueError(f"Unsupported file extension: {file_path.suffix or '(none)'} in {file_path.name}")
    return grammar


def resolve_language(language: str | None, file_path: Path | None) -> str:
    """An explicit ``language`` wins over the file's extension."""
    if language:
        return normalize_language(language)
    if file_path is None:
        raise ValueError("Language must be provided when no file path is available.")
    return detect_language_from_path(file_path)


def is_supported_file(path: Path) -> bool:
    return path.suffix.lower() in _BY_EXTENSION
