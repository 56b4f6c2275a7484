"""
Tree-sitter based import locator.

Parses a script as a JavaScript module and reports, for every import
declaration, the full statement range and the range of the module specifier
between its quotes. Everything else in the syntax tree is discarded.

Ranges are reported in character offsets of the decoded source, so they can
be used to slice the ``str`` directly even when the script contains
non-ASCII text (tree-sitter itself works in UTF-8 byte offsets).
"""

from __future__ import annotations

import logging
from functools import lru_cache

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser

from .errors import ParseFailure
from .models import ImportRecord, SourceRange

LOG = logging.getLogger("rewrite.locator")

JS_LANGUAGE = Language(tree_sitter_javascript.language())

IMPORT_STATEMENT = "import_statement"
PROGRAM = "program"

FUNCTION_SCOPES = frozenset(
    {
        "function",
        "function_declaration",
        "function_expression",
        "generator_function",
        "generator_function_declaration",
        "arrow_function",
        "method_definition",
    }
)
LEXICAL_DECLARATIONS = frozenset(
    {"lexical_declaration", "class_declaration", "function_declaration", "generator_function_declaration"}
)


class _OffsetMap:
    """Translate UTF-8 byte offsets into character offsets."""

    def __init__(self, data: bytes, text: str):
        self._data = data
        self._identity = len(data) == len(text)

    def char_offset(self, byte_offset: int) -> int:
        if self._identity:
            return byte_offset
        return len(self._data[:byte_offset].decode("utf-8"))


def _first_syntax_error(root: Node) -> Node | None:
    """Find the first ERROR or MISSING node in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


def _describe_error(node: Node, data: bytes) -> str:
    if node.is_missing:
        return f"Missing {node.type!r}"
    snippet = data[node.start_byte : node.end_byte].decode("utf-8", errors="replace").strip()
    if len(snippet) > 40:
        snippet = snippet[:40] + "..."
    return f"Unexpected token {snippet!r}" if snippet else "Unexpected token"


class ImportStatementVisitor:
    """
    Collects ``import_statement`` nodes in source order.

    Import declarations never nest inside one another, so the walk does not
    descend into a statement once it has been collected.
    """

    def __init__(self) -> None:
        self.statements: list[Node] = []

    def visit(self, root: Node) -> list[Node]:
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == IMPORT_STATEMENT:
                self.visit_import_statement(node)
                continue
            stack.extend(reversed(node.named_children))
        return self.statements

    def visit_import_statement(self, node: Node) -> None:
        parent = node.parent
        if parent is not None and parent.type != PROGRAM:
            row, column = node.start_point
            raise ParseFailure(
                "'import' and 'export' may only appear at the top level",
                line=row + 1,
                column=column + 1,
            )
        self.statements.append(node)


def _failure_at(message: str, node: Node) -> ParseFailure:
    row, column = node.start_point
    return ParseFailure(message, line=row + 1, column=column + 1)


class ModuleRulesChecker:
    """
    Rejects scripts that parse but are not valid modules.

    tree-sitter accepts anything the grammar can recover into a tree, so the
    rules that only apply to module code are checked here: no ``return``
    outside a function, no ``with``, no JSX, and no top-level name bound
    twice by imports or lexical declarations.
    """

    def __init__(self, data: bytes) -> None:
        self._data = data

    def _text(self, node: Node) -> str:
        return self._data[node.start_byte : node.end_byte].decode("utf-8")

    def check(self, root: Node) -> None:
        stack: list[tuple[Node, bool]] = [(root, False)]
        while stack:
            node, in_function = stack.pop()
            if node.type == "return_statement" and not in_function:
                raise _failure_at("'return' outside of function", node)
            if node.type == "with_statement":
                raise _failure_at("'with' in strict mode", node)
            if node.type.startswith("jsx_"):
                raise _failure_at("Unexpected token '<'", node)
            nested = in_function or node.type in FUNCTION_SCOPES
            stack.extend((child, nested) for child in reversed(node.named_children))

        self._check_bindings(root)

    def _check_bindings(self, root: Node) -> None:
        lexical: set[str] = set()
        var_names: set[str] = set()

        for statement in root.named_children:
            declaration = statement
            if statement.type == "export_statement":
                declaration = statement.child_by_field_name("declaration")
                if declaration is None:
                    continue

            if declaration.type == "variable_declaration":
                for name, node in self._declared_names(declaration):
                    if name in lexical:
                        raise _failure_at(f"Identifier '{name}' has already been declared", node)
                    var_names.add(name)
                continue

            if declaration.type == IMPORT_STATEMENT:
                names = self._import_names(declaration)
            elif declaration.type in LEXICAL_DECLARATIONS:
                names = self._declared_names(declaration)
            else:
                continue

            for name, node in names:
                if name in lexical or name in var_names:
                    raise _failure_at(f"Identifier '{name}' has already been declared", node)
                lexical.add(name)

    def _import_names(self, statement: Node) -> list[tuple[str, Node]]:
        names: list[tuple[str, Node]] = []
        for clause in statement.named_children:
            if clause.type != "import_clause":
                continue
            for part in clause.named_children:
                if part.type == "identifier":
                    names.append((self._text(part), part))
                elif part.type == "namespace_import":
                    names.extend((self._text(n), n) for n in part.named_children if n.type == "identifier")
                elif part.type == "named_imports":
                    for specifier in part.named_children:
                        if specifier.type != "import_specifier":
                            continue
                        local = specifier.child_by_field_name("alias") or specifier.child_by_field_name("name")
                        if local is not None:
                            names.append((self._text(local), local))
        return names

    def _declared_names(self, declaration: Node) -> list[tuple[str, Node]]:
        name = declaration.child_by_field_name("name")
        if name is not None:
            return [(self._text(name), name)]
        names: list[tuple[str, Node]] = []
        for declarator in declaration.named_children:
            if declarator.type == "variable_declarator":
                target = declarator.child_by_field_name("name")
                if target is not None:
                    names.extend(self._pattern_names(target))
        return names

    def _pattern_names(self, pattern: Node) -> list[tuple[str, Node]]:
        if pattern.type in ("identifier", "shorthand_property_identifier_pattern"):
            return [(self._text(pattern), pattern)]
        if pattern.type in ("assignment_pattern", "object_assignment_pattern"):
            left = pattern.child_by_field_name("left")
            return self._pattern_names(left) if left is not None else []
        if pattern.type == "pair_pattern":
            value = pattern.child_by_field_name("value")
            return self._pattern_names(value) if value is not None else []
        names: list[tuple[str, Node]] = []
        for child in pattern.named_children:
            names.extend(self._pattern_names(child))
        return names


class ImportLocator:
    """Parses scripts and extracts their import declarations."""

    def __init__(self) -> None:
        self._parser = Parser(JS_LANGUAGE)

    def locate(self, source: str) -> list[ImportRecord]:
        """
        Locate every import declaration in a script.

        Args:
            source: Full script text

        Returns:
            ImportRecords in source order

        Raises:
            ParseFailure: If the script is not a syntactically valid module
        """
        try:
            data = source.encode("utf-8")
        except UnicodeEncodeError as exc:
            line_start = source.rfind("\n", 0, exc.start) + 1
            raise ParseFailure(
                f"Invalid character {source[exc.start]!r} ({exc.reason})",
                line=source.count("\n", 0, exc.start) + 1,
                column=exc.start - line_start + 1,
            ) from exc

        tree = self._parser.parse(data)
        root = tree.root_node

        if root.has_error:
            error_node = _first_syntax_error(root)
            if error_node is None:
                raise ParseFailure("Unexpected token")
            raise _failure_at(_describe_error(error_node, data), error_node)

        ModuleRulesChecker(data).check(root)

        offsets = _OffsetMap(data, source)
        records: list[ImportRecord] = []

        for statement in ImportStatementVisitor().visit(root):
            specifier_node = statement.child_by_field_name("source")
            if specifier_node is None:
                continue

            # The string node includes its quote characters.
            spec_start = offsets.char_offset(specifier_node.start_byte + 1)
            spec_end = offsets.char_offset(specifier_node.end_byte - 1)
            if spec_end <= spec_start:
                LOG.debug("Skipping import with empty specifier at line %d", statement.start_point[0] + 1)
                continue

            records.append(
                ImportRecord(
                    specifier=source[spec_start:spec_end],
                    specifier_range=SourceRange(spec_start, spec_end),
                    statement_range=SourceRange(
                        offsets.char_offset(statement.start_byte),
                        offsets.char_offset(statement.end_byte),
                    ),
                    line=statement.start_point[0] + 1,
                )
            )

        LOG.debug("Located %d import declarations", len(records))
        return records


@lru_cache(maxsize=1)
def get_locator() -> ImportLocator:
    """Shared locator instance; parsing is single-threaded."""
    return ImportLocator()


def locate_imports(source: str) -> list[ImportRecord]:
    """Locate import declarations using the shared locator."""
    return get_locator().locate(source)
