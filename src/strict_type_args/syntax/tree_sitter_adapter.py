from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from typing import cast

from tree_sitter import Node, Parser
from tree_sitter_language_pack import SupportedLanguage, get_parser

from strict_type_args.core.languages import normalize_language

_TYPE_REFERENCES = frozenset({"generic_type", "type_identifier", "nested_type_identifier"})

# Names the TypeScript grammar leaves as plain identifiers in Flow type positions
_PLAIN_NAMES = frozenset({"type_identifier", "identifier", "property_identifier"})

# Parents whose "name" field declares a type rather than referencing one
_DECLARATION_PARENTS = frozenset(
    {
        "abstract_class_declaration",
        "class",
        "class_declaration",
        "interface_declaration",
        "mapped_type_clause",
        "type_alias_declaration",
        "type_parameter",
    }
)

# "..." under any other parent is a Flow object-type spread
_VALUE_SPREAD_PARENTS = frozenset({"spread_element", "rest_pattern", "rest_type"})

# Flow maybe types ("?T"), exact object braces ("{|" and "|}")
_FLOW_PUNCTUATION = re.compile(rb"\?|\{\||\|\}")

# "?" after one of these cannot start a ternary, optional member or "??"
_MAYBE_TYPE_CONTEXT = frozenset(b":<,(=|&[{")

_WHITESPACE = frozenset(b" \t\r\n")


def _skip_back(source: bytes, index: int) -> int:
    """Index of the last non-blank byte before ``index``, or -1."""
    index -= 1
    while index >= 0 and source[index] in _WHITESPACE:
        index -= 1
    return index


def _skip_forward(source: bytes, index: int) -> int:
    while index < len(source) and source[index] in _WHITESPACE:
        index += 1
    return index


def _is_maybe_prefix(source: bytes, index: int) -> bool:
    previous = _skip_back(source, index)
    if previous < 0:
        return False
    if source[previous] == ord(">"):
        return previous > 0 and source[previous - 1] == ord("=")
    return source[previous] in _MAYBE_TYPE_CONTEXT


def _mask_flow_syntax(source: bytes) -> bytes:
    """Blank out Flow-only punctuation the TypeScript grammar rejects.

    Each masked byte becomes a space, so offsets into the result are offsets
    into ``source``.
    """
    masked = bytearray(source)
    for match in _FLOW_PUNCTUATION.finditer(source):
        token, start = match.group(), match.start()
        if token == b"?":
            if _is_maybe_prefix(source, start):
                masked[start] = ord(" ")
        elif token == b"{|":
            masked[start + 1] = ord(" ")
        else:
            masked[start] = ord(" ")
    return bytes(masked)


def _walk(root: Node) -> Iterator[Node]:
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _mask_spreads(source: bytes, spreads: Iterable[Node]) -> bytes:
    masked = bytearray(source)
    for node in spreads:
        masked[node.start_byte : node.end_byte] = b" " * (node.end_byte - node.start_byte)
    return bytes(masked)


def _same_span(a: Node, b: Node) -> bool:
    return a.start_byte == b.start_byte and a.end_byte == b.end_byte and a.type == b.type


def _is_type_reference(node: Node) -> bool:
    if node.type == "generic_type":
        return True
    parent = node.parent
    if parent is None:
        return True
    if parent.type in ("generic_type", "nested_type_identifier", "infer_type"):
        return False
    if parent.type in _DECLARATION_PARENTS:
        declared = parent.child_by_field_name("name")
        return declared is None or not _same_span(declared, node)
    return True


def _is_unnamed_parameter(node: Node) -> bool:
    """Whether ``node`` is a bare type in a function type, as in ``(Props) => void``."""
    parameter = node.parent
    if parameter is None or parameter.type != "required_parameter":
        return False
    if parameter.child_by_field_name("type") is not None:
        return False
    pattern = parameter.child_by_field_name("pattern")
    if pattern is None or not _same_span(pattern, node):
        return False
    parameters = parameter.parent
    return (
        parameters is not None
        and parameters.type == "formal_parameters"
        and parameters.parent is not None
        and parameters.parent.type == "function_type"
    )


class TreeSitterSyntaxTree:
    """A parsed source file with pending text replacements.

    Replacements are byte-span edits against the original source; they are
    applied when the tree is serialized with ``to_source``. ``spread_names``
    holds the start offsets of names that followed a masked object-type
    spread.
    """

    def __init__(
        self,
        source: bytes,
        root: Node,
        placeholder: str,
        spread_names: frozenset[int] = frozenset(),
    ) -> None:
        self._source = source
        self._root = root
        self._placeholder = placeholder
        self._spread_names = spread_names
        self._edits: list[tuple[int, int, bytes]] = []

    @property
    def root(self) -> Node:
        return self._root

    def type_applications(self) -> list[Node]:
        return [node for node in _walk(self._root) if self._is_candidate(node)]

    def ancestors(self, node: Node) -> Iterator[Node]:
        current = node.parent
        while current is not None:
            yield current
            current = current.parent

    def is_type_of(self, node: Node) -> bool:
        return node.type == "type_query"

    def span(self, node: Node) -> tuple[int, int]:
        return node.start_byte, node.end_byte

    def has_type_arguments(self, node: Node) -> bool:
        if node.type == "generic_type":
            arguments = node.child_by_field_name("type_arguments")
            return arguments is not None and len(arguments.named_children) > 0
        if node.type in ("identifier", "property_identifier"):
            # the grammar does not attach "<...>" after a bare parameter or spread name
            following = _skip_forward(self._source, node.end_byte)
            return following < len(self._source) and self._source[following] == ord("<")
        return False

    def name_reference(self, node: Node) -> str | None:
        name = self._name_node(node)
        if name is None:
            return None
        if name.type in _PLAIN_NAMES:
            return self._text(name)
        if name.type == "nested_type_identifier":
            module = name.child_by_field_name("module")
            ident = name.child_by_field_name("name")
            if module is not None and ident is not None and module.type == "identifier":
                return f"{self._text(module)}.{self._text(ident)}"
        return None

    def placeholder_type(self) -> str:
        return self._placeholder

    def type_application(self, node: Node, arguments: Sequence[str]) -> str:
        name = self._name_node(node)
        if name is None:
            raise ValueError(f"Node {node.type} at {node.start_byte}:{node.end_byte} has no name reference")
        return f"{self._text(name)}<{', '.join(arguments)}>"

    def replace(self, node: Node, replacement: str) -> None:
        start, end = node.start_byte, node.end_byte
        for edit_start, edit_end, _ in self._edits:
            if start < edit_end and edit_start < end:
                raise ValueError(f"Replacement at {start}:{end} overlaps earlier edit at {edit_start}:{edit_end}")
        self._edits.append((start, end, replacement.encode("utf-8")))

    def to_source(self) -> str:
        buffer = bytearray(self._source)
        for start, end, replacement in sorted(self._edits, key=lambda edit: edit[0], reverse=True):
            buffer[start:end] = replacement
        return buffer.decode("utf-8")

    def _is_candidate(self, node: Node) -> bool:
        if node.start_byte in self._spread_names and node.type in _PLAIN_NAMES and node.child_count == 0:
            return True
        if node.type == "identifier":
            return _is_unnamed_parameter(node)
        if node.type not in _TYPE_REFERENCES:
            return False
        # "%checks" predicates parse as a stray type name
        previous = _skip_back(self._source, node.start_byte)
        if previous >= 0 and self._source[previous] == ord("%"):
            return False
        return _is_type_reference(node)

    def _name_node(self, node: Node) -> Node | None:
        if node.type == "generic_type":
            return node.child_by_field_name("name")
        if node.type in _PLAIN_NAMES or node.type == "nested_type_identifier":
            return node
        return None

    def _text(self, node: Node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")


class TreeSitterBackend:
    """Parse Flow/JavaScript sources with a tree-sitter TypeScript grammar.

    Flow-only punctuation (maybe types, exact object braces, object-type
    spreads) is blanked out before parsing; edits always apply to the
    unmasked source. Implements the ``SyntaxBackend`` protocol.
    """

    def __init__(self, language: str = "tsx", placeholder: str = "any") -> None:
        self.language = normalize_language(language)
        self.placeholder = placeholder
        self._parser: Parser = get_parser(cast(SupportedLanguage, self.language))

    def parse(self, source: str) -> TreeSitterSyntaxTree:
        source_bytes = source.encode("utf-8")
        masked = _mask_flow_syntax(source_bytes)
        root = self._parser.parse(masked).root_node
        spreads = [
            node
            for node in _walk(root)
            if node.type == "..." and (node.parent is None or node.parent.type not in _VALUE_SPREAD_PARENTS)
        ]
        if not spreads:
            return TreeSitterSyntaxTree(source_bytes, root, self.placeholder)
        masked = _mask_spreads(masked, spreads)
        spread_names = frozenset(_skip_forward(masked, node.end_byte) for node in spreads)
        root = self._parser.parse(masked).root_node
        return TreeSitterSyntaxTree(source_bytes, root, self.placeholder, spread_names)
