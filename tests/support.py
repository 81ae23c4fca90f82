"""Helpers shared by the unit tests: Flow report entries and an in-memory syntax backend."""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

ARITY_DESCR = "Application of polymorphic type needs <list of {arity} more type arguments>."


def arity_entry(path: str, start: int, end: int, arity: int) -> dict[str, Any]:
    """Build one Flow error entry reporting a missing type argument list."""
    return {
        "kind": "infer",
        "level": "error",
        "message": [
            {
                "descr": "Bar",
                "path": path,
                "loc": {"source": path, "start": {"offset": start}, "end": {"offset": end}},
            },
            {"descr": ARITY_DESCR.format(arity=arity), "path": path},
        ],
    }


def span_of(source: str, text: str, occurrence: int = 0) -> tuple[int, int]:
    """Byte span of the n-th occurrence of *text* in *source*."""
    start = -1
    for _ in range(occurrence + 1):
        start = source.index(text, start + 1)
    prefix = source[:start].encode("utf-8")
    return len(prefix), len(prefix) + len(text.encode("utf-8"))


# ---------------------------------------------------------------------------
# In-memory syntax backend
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class FakeNode:
    kind: str
    start: int
    end: int
    name: str | None = None
    arguments: list[str] = field(default_factory=list)
    parent: "FakeNode | None" = None
    children: list["FakeNode"] = field(default_factory=list)

    def add(self, child: "FakeNode") -> "FakeNode":
        child.parent = self
        self.children.append(child)
        return child


class FakeSyntaxTree:
    """Syntax tree built by hand; ``kind == "type"`` nodes are type applications."""

    def __init__(self, source: str, root: FakeNode) -> None:
        self.source = source
        self.root = root
        self.replacements: list[tuple[FakeNode, str]] = []

    def type_applications(self) -> list[FakeNode]:
        found: list[FakeNode] = []
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.kind == "type":
                found.append(node)
            stack.extend(reversed(node.children))
        return found

    def ancestors(self, node: FakeNode) -> Iterator[FakeNode]:
        current = node.parent
        while current is not None:
            yield current
            current = current.parent

    def is_type_of(self, node: FakeNode) -> bool:
        return node.kind == "typeof"

    def span(self, node: FakeNode) -> tuple[int, int]:
        return node.start, node.end

    def has_type_arguments(self, node: FakeNode) -> bool:
        return bool(node.arguments)

    def name_reference(self, node: FakeNode) -> str | None:
        return node.name

    def placeholder_type(self) -> str:
        return "any"

    def type_application(self, node: FakeNode, arguments: Sequence[str]) -> str:
        return f"{node.name}<{', '.join(arguments)}>"

    def replace(self, node: FakeNode, replacement: str) -> None:
        self.replacements.append((node, replacement))

    def to_source(self) -> str:
        text = self.source
        for node, replacement in sorted(self.replacements, key=lambda item: item[0].start, reverse=True):
            text = text[: node.start] + replacement + text[node.end :]
        return text


class FakeSyntaxBackend:
    def __init__(self, build: Callable[[str], FakeSyntaxTree]) -> None:
        self._build = build
        self.parsed = 0

    def parse(self, source: str) -> FakeSyntaxTree:
        self.parsed += 1
        return self._build(source)
