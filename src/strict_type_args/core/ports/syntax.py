from collections.abc import Iterator, Sequence
from typing import Any, Protocol


class SyntaxTree(Protocol):
    def type_applications(self) -> list[Any]: ...

    def ancestors(self, node: Any) -> Iterator[Any]: ...

    def is_type_of(self, node: Any) -> bool: ...

    def span(self, node: Any) -> tuple[int, int]: ...

    def has_type_arguments(self, node: Any) -> bool: ...

    def name_reference(self, node: Any) -> str | None: ...

    def placeholder_type(self) -> str: ...

    def type_application(self, node: Any, arguments: Sequence[str]) -> str: ...

    def replace(self, node: Any, replacement: str) -> None: ...

    def to_source(self) -> str: ...


class SyntaxBackend(Protocol):
    def parse(self, source: str) -> SyntaxTree: ...
