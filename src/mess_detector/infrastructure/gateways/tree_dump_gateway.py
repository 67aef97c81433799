"""Tree Dump Gateway - builds SyntaxTree arenas from upstream parser JSON dumps."""

import json
from pathlib import Path

from mess_detector.domain.errors import TreeLoadError
from mess_detector.domain.nodes import NodeKind, SyntaxTree, SyntaxTreeBuilder
from mess_detector.domain.protocols import TreeLoaderProtocol

# Node keys copied into NodeRecord.attributes, with the type each must have. null means absent.
_ATTRIBUTE_TYPES: dict[str, type] = {
    "abstract": bool,
    "static": bool,
    "declaration": bool,
    "docComment": str,
}


class TreeDumpGateway(TreeLoaderProtocol):
    """
    Reads ``{"file": ..., "root": NODE}`` documents.

    NODE is ``{"kind", "image", "beginLine", "endLine", "children", ...}``;
    only ``kind`` is required.
    """

    def load(self, file_path: str) -> SyntaxTree:
        try:
            text = Path(file_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TreeLoadError(file_path, f"Cannot read tree dump: {exc}") from exc
        return self.loads(text, file_path)

    def loads(self, text: str, dump_path: str = "<memory>") -> SyntaxTree:
        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise TreeLoadError(dump_path, f"Invalid JSON: {exc}") from exc
        except RecursionError as exc:
            raise TreeLoadError(dump_path, "Tree dump is nested too deeply to decode.") from exc
        return self.from_document(document, dump_path)

    def from_document(self, document: object, dump_path: str = "<memory>") -> SyntaxTree:
        if not isinstance(document, dict) or not isinstance(document.get("root"), dict):
            raise TreeLoadError(dump_path, "Tree dump must be an object with a 'root' node.")
        unit_path = document.get("file", dump_path)
        if not isinstance(unit_path, str) or not unit_path:
            raise TreeLoadError(dump_path, "'file' must be a non-empty string.")

        builder = SyntaxTreeBuilder(unit_path)
        # Explicit stack keeps deep trees clear of the recursion limit.
        stack: list[tuple[object, int | None]] = [(document["root"], None)]
        while stack:
            raw, parent = stack.pop()
            index = self._add_node(builder, raw, parent, unit_path)
            children = raw.get("children", [])  # type: ignore[union-attr]
            if not isinstance(children, list):
                raise TreeLoadError(unit_path, f"'children' of node {index} must be a list.")
            stack.extend((child, index) for child in reversed(children))
        return builder.build()

    def _add_node(
        self,
        builder: SyntaxTreeBuilder,
        raw: object,
        parent: int | None,
        unit_path: str,
    ) -> int:
        if not isinstance(raw, dict):
            raise TreeLoadError(unit_path, f"Tree node must be an object, got {type(raw).__name__}.")
        tag = raw.get("kind")
        try:
            kind = NodeKind.from_tag(str(tag))
        except ValueError as exc:
            raise TreeLoadError(unit_path, f"Unknown node kind {tag!r}.") from exc
        begin_line = raw.get("beginLine", 0)
        end_line = raw.get("endLine", begin_line)
        if not isinstance(begin_line, int) or not isinstance(end_line, int):
            raise TreeLoadError(unit_path, f"Line numbers of {kind.value} node must be integers.")
        attributes = {key: raw[key] for key in _ATTRIBUTE_TYPES if raw.get(key) is not None}
        for key, value in attributes.items():
            if not isinstance(value, _ATTRIBUTE_TYPES[key]):
                raise TreeLoadError(
                    unit_path,
                    f"'{key}' of {kind.value} node must be {_ATTRIBUTE_TYPES[key].__name__}, "
                    f"got {type(value).__name__}.",
                )
        image = raw.get("image", "")
        return builder.add(
            kind,
            image="" if image is None else str(image),
            begin_line=begin_line,
            end_line=end_line,
            parent=parent,
            attributes=attributes,
        )
