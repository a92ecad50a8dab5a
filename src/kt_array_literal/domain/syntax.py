"""
Host-side syntax tree for Kotlin sources.

Nodes live in an arena owned by SyntaxTree and are addressed by stable integer
ids. Rewrite actions hold ids, never node objects, and re-resolve them against
the current tree when they run. Nodes parsed from a file carry the byte span
they came from; nodes created by SyntaxTreeFactory have no span and are
printed from their structure.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

from kt_array_literal.domain.errors import RewriteContractError

NodeId = int


class NodeKind(Enum):
    """Node kinds the inspection distinguishes. Everything else is EXPRESSION."""

    FILE = "file"
    PACKAGE_HEADER = "package_header"
    IMPORT_DIRECTIVE = "import_directive"
    CLASS_DECLARATION = "class_declaration"
    PRIMARY_CONSTRUCTOR = "primary_constructor"
    PARAMETER_LIST = "parameter_list"
    PARAMETER = "parameter"
    FUNCTION_DECLARATION = "function_declaration"
    ANNOTATION_ENTRY = "annotation_entry"
    CALL_EXPRESSION = "call_expression"
    VALUE_ARGUMENT_LIST = "value_argument_list"
    VALUE_ARGUMENT = "value_argument"
    NAME_REFERENCE = "name_reference"
    COLLECTION_LITERAL = "collection_literal"
    EXPRESSION = "expression"


@dataclass(frozen=True)
class Span:
    """Half-open byte range [start, end) in the original source."""

    start: int
    end: int


@dataclass
class SyntaxNode:
    """
    One node of the tree.

    `callee` is set on CALL_EXPRESSION, `value` on VALUE_ARGUMENT (the argument
    expression) and PARAMETER (the default value). `replaced_span` is set on a
    node that replace() put in the place of a parsed node.
    """

    node_id: NodeId
    kind: NodeKind
    span: Span | None = None
    name: str = ""
    parent: NodeId | None = None
    children: list[NodeId] = field(default_factory=list)
    callee: NodeId | None = None
    value: NodeId | None = None
    is_annotation: bool = False
    replaced_span: Span | None = None
    attributes: dict[str, str] = field(default_factory=dict)

    @property
    def is_synthesized(self) -> bool:
        """True for nodes built by the factory rather than parsed from source."""
        return self.span is None


class SyntaxTree:
    """Arena of SyntaxNodes with parent links, atomic replace and source rendering."""

    def __init__(self, source: str | bytes = b"", path: str = "<memory>") -> None:
        self._source = source.encode("utf-8") if isinstance(source, str) else source
        self.path = path
        self.revision = 0
        self._nodes: dict[NodeId, SyntaxNode] = {}
        self._next_id = 0
        self._root_id: NodeId | None = None
        self._line_starts: list[int] | None = None

    @property
    def root(self) -> SyntaxNode:
        """The FILE node."""
        if self._root_id is None:
            raise RewriteContractError("tree has no FILE root")
        return self._nodes[self._root_id]

    def add_node(
        self,
        kind: NodeKind,
        *,
        parent: SyntaxNode | None = None,
        span: Span | None = None,
        name: str = "",
        is_annotation: bool = False,
        attributes: dict[str, str] | None = None,
    ) -> SyntaxNode:
        """Create a node, append it to `parent` when given. The first FILE node becomes root."""
        node = SyntaxNode(
            node_id=self._next_id,
            kind=kind,
            span=span,
            name=name,
            is_annotation=is_annotation,
            attributes=dict(attributes or {}),
        )
        self._next_id += 1
        self._nodes[node.node_id] = node
        if kind is NodeKind.FILE and self._root_id is None:
            self._root_id = node.node_id
        if parent is not None:
            parent.children.append(node.node_id)
            node.parent = parent.node_id
        return node

    def get(self, node_id: NodeId) -> SyntaxNode | None:
        """Return the node with this id, or None once it has been removed."""
        return self._nodes.get(node_id)

    def require(self, node_id: NodeId) -> SyntaxNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise RewriteContractError(f"node {node_id} is no longer part of the tree")
        return node

    def parent_of(self, node: SyntaxNode) -> SyntaxNode | None:
        if node.parent is None:
            return None
        return self._nodes.get(node.parent)

    def children_of(self, node: SyntaxNode) -> list[SyntaxNode]:
        return [self._nodes[child_id] for child_id in node.children]

    def first_child(self, node: SyntaxNode, kind: NodeKind) -> SyntaxNode | None:
        for child in self.children_of(node):
            if child.kind is kind:
                return child
        return None

    def walk(self, kind: NodeKind | None = None) -> Iterator[SyntaxNode]:
        """Pre-order traversal from the root, in document order."""
        if self._root_id is None:
            return
        stack = [self._root_id]
        while stack:
            node = self._nodes[stack.pop()]
            if kind is None or node.kind is kind:
                yield node
            stack.extend(reversed(node.children))

    def is_attached(self, node: SyntaxNode) -> bool:
        """True when following parents from `node` reaches the root."""
        current: SyntaxNode | None = node
        while current is not None:
            if current.node_id == self._root_id:
                return True
            current = self.parent_of(current)
        return False

    # -- mutation -----------------------------------------------------------

    def reparent(self, node: SyntaxNode, new_parent: SyntaxNode) -> None:
        """Move `node` (with its subtree) under `new_parent`, detaching it from its old parent."""
        old_parent = self.parent_of(node)
        if old_parent is not None:
            old_parent.children.remove(node.node_id)
            if old_parent.callee == node.node_id:
                old_parent.callee = None
            if old_parent.value == node.node_id:
                old_parent.value = None
        new_parent.children.append(node.node_id)
        node.parent = new_parent.node_id

    def replace(self, old_id: NodeId, new_id: NodeId) -> SyntaxNode:
        """
        Put the detached node `new_id` where `old_id` is and drop the old subtree.

        All checks run before anything is mutated, so a failed replace leaves the
        tree untouched. Nodes previously moved out of the old subtree survive.
        """
        old = self.require(old_id)
        new = self.require(new_id)
        parent = self.parent_of(old)
        if parent is None:
            raise RewriteContractError(f"node {old_id} is the root or detached and cannot be replaced")
        if new.parent is not None:
            raise RewriteContractError(f"replacement node {new_id} is already attached")
        if new_id == self._root_id:
            raise RewriteContractError("the root cannot be used as a replacement")

        index = parent.children.index(old_id)
        parent.children[index] = new_id
        new.parent = parent.node_id
        new.replaced_span = old.span if old.span is not None else old.replaced_span
        if parent.callee == old_id:
            parent.callee = new_id
        if parent.value == old_id:
            parent.value = new_id
        old.parent = None
        self._discard(old)
        self.revision += 1
        return new

    def _discard(self, node: SyntaxNode) -> None:
        stack = [node.node_id]
        while stack:
            current = self._nodes.pop(stack.pop())
            stack.extend(current.children)

    # -- rendering ----------------------------------------------------------

    def render(self, node: SyntaxNode | None = None) -> str:
        """Source text of `node` (default: the whole file) with every replacement applied."""
        target = self.root if node is None else node
        return self._render(target).decode("utf-8")

    def _render(self, node: SyntaxNode) -> bytes:
        if node.is_synthesized:
            return _print_synthesized(self, node).encode("utf-8")
        start = 0 if node.node_id == self._root_id else node.span.start
        end = len(self._source) if node.node_id == self._root_id else node.span.end
        pieces: list[bytes] = []
        cursor = start
        for replacement in self._replacements_within(node):
            replaced = replacement.replaced_span
            if replaced is None or replaced.start < cursor or replaced.end > end:
                continue
            pieces.append(self._source[cursor:replaced.start])
            pieces.append(self._render(replacement))
            cursor = replaced.end
        pieces.append(self._source[cursor:end])
        return b"".join(pieces)

    def _replacements_within(self, node: SyntaxNode) -> list[SyntaxNode]:
        found: list[SyntaxNode] = []
        stack = list(reversed(node.children))
        while stack:
            current = self._nodes[stack.pop()]
            if current.is_synthesized:
                found.append(current)
                continue
            stack.extend(reversed(current.children))
        return sorted(
            found, key=lambda n: n.replaced_span.start if n.replaced_span is not None else -1
        )

    # -- positions ----------------------------------------------------------

    def position_of(self, node: SyntaxNode) -> tuple[int, int]:
        """1-based (line, column) of the node start. Synthesized nodes use the span they replaced."""
        span = node.span if node.span is not None else node.replaced_span
        if span is None:
            return (0, 0)
        if self._line_starts is None:
            self._line_starts = [0] + [
                index + 1 for index, byte in enumerate(self._source) if byte == 0x0A
            ]
        line_index = bisect_right(self._line_starts, span.start) - 1
        return (line_index + 1, span.start - self._line_starts[line_index] + 1)

    def location_of(self, node: SyntaxNode) -> str:
        line, column = self.position_of(node)
        return f"{self.path}:{line}:{column}"


class SyntaxTreeFactory:
    """Builds detached nodes; callers attach them with SyntaxTree.replace or add_node parents."""

    def create_collection_literal(
        self, tree: SyntaxTree, elements: Sequence[SyntaxNode]
    ) -> SyntaxNode:
        """`[e1, e2, ...]` whose children are `elements`, moved in order (not copied)."""
        literal = tree.add_node(NodeKind.COLLECTION_LITERAL)
        for element in elements:
            tree.reparent(element, literal)
        return literal

    def create_name_reference(self, tree: SyntaxTree, name: str, parent: SyntaxNode | None = None) -> SyntaxNode:
        return tree.add_node(NodeKind.NAME_REFERENCE, parent=parent, name=name)

    def create_expression(self, tree: SyntaxTree, text: str, parent: SyntaxNode | None = None) -> SyntaxNode:
        """Opaque expression printed verbatim as `text`."""
        return tree.add_node(NodeKind.EXPRESSION, parent=parent, name=text)

    def create_call(
        self,
        tree: SyntaxTree,
        callee_name: str,
        arguments: Sequence[str],
        parent: SyntaxNode | None = None,
    ) -> SyntaxNode:
        """`callee(arg, ...)` with each argument an opaque expression."""
        call = tree.add_node(NodeKind.CALL_EXPRESSION, parent=parent)
        call.callee = self.create_name_reference(tree, callee_name, parent=call).node_id
        argument_list = tree.add_node(NodeKind.VALUE_ARGUMENT_LIST, parent=call)
        for text in arguments:
            argument = tree.add_node(NodeKind.VALUE_ARGUMENT, parent=argument_list)
            argument.value = self.create_expression(tree, text, parent=argument).node_id
        return call


def _join(tree: SyntaxTree, nodes: list[SyntaxNode], separator: str) -> str:
    return separator.join(tree.render(child) for child in nodes)


def _print_synthesized(tree: SyntaxTree, node: SyntaxNode) -> str:
    children = tree.children_of(node)
    kind = node.kind
    if kind is NodeKind.COLLECTION_LITERAL:
        return "[" + _join(tree, children, ", ") + "]"
    if kind is NodeKind.VALUE_ARGUMENT_LIST or kind is NodeKind.PARAMETER_LIST:
        return "(" + _join(tree, children, ", ") + ")"
    if kind is NodeKind.CALL_EXPRESSION or kind is NodeKind.PRIMARY_CONSTRUCTOR:
        return _join(tree, children, "")
    if kind is NodeKind.VALUE_ARGUMENT:
        prefix = f"{node.name} = " if node.name else ""
        if node.attributes.get("spread") == "true":
            prefix += "*"
        return prefix + _join(tree, children, "")
    if kind is NodeKind.ANNOTATION_ENTRY:
        return "@" + node.name + _join(tree, children, "")
    if kind is NodeKind.CLASS_DECLARATION:
        prefix = "annotation class " if node.is_annotation else "class "
        return prefix + node.name + _join(tree, children, "")
    if kind is NodeKind.PARAMETER:
        text = f"val {node.name}: {node.attributes.get('type', 'Any')}"
        default = tree.get(node.value) if node.value is not None else None
        if default is not None:
            text += " = " + tree.render(default)
        return text
    if kind is NodeKind.FUNCTION_DECLARATION:
        return f"fun {node.name}()"
    if kind is NodeKind.IMPORT_DIRECTIVE:
        alias = node.attributes.get("alias")
        return f"import {node.name}" + (f" as {alias}" if alias else "")
    if kind is NodeKind.PACKAGE_HEADER:
        return f"package {node.name}"
    if kind is NodeKind.FILE:
        return _join(tree, children, "\n")
    if children:
        return _join(tree, children, " ")
    return node.name
