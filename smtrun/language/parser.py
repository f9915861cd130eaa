"""
SMTL Parser - Source Text to AST

SMTL is written in Go syntax, so the text is parsed with tree-sitter's Go
grammar and the resulting tree is adapted into the closed AST in ast.py.

The adapter only recognizes shapes:
- the package clause must name ``smtl``
- the body of the first parameterless ``main`` is the statement list
- host nodes outside the SMTL grammar become Unsupported* placeholders so
  the compiler reports them in source order
"""

from typing import Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from .ast import (
    # Top-level
    Program,

    # Statements
    Statement,
    VarDeclaration,
    ExpressionStatement,
    UnsupportedStatementNode,
    TypeRef,

    # Expressions
    Expression,
    BoolLiteral,
    IntLiteral,
    Identifier,
    BinaryOp,
    UnaryOp,
    ParenExpr,
    Call,
    MethodCall,
    UnsupportedExpressionNode,
)
from .errors import ParseError, UnsupportedModule


SMTL_PACKAGE = "smtl"
ENTRY_POINT = "main"

GO_LANGUAGE = Language(tree_sitter_go.language())

# Host nodes that carry no meaning for SMTL
_SKIPPED_NODE_TYPES = frozenset({"comment", "empty_statement"})


# ============================================================================
# TREE HELPERS
# ============================================================================

def _location(node: Node) -> tuple:
    row, column = node.start_point
    return (row + 1, column + 1)


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _named(node: Node) -> Iterator[Node]:
    """Named children minus comments"""
    for child in node.named_children:
        if child.type not in _SKIPPED_NODE_TYPES:
            yield child


def _first_error(node: Node) -> Optional[Node]:
    """Pre-order search for the first ERROR or MISSING node"""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_error(child)
            if found is not None:
                return found
    return None


# ============================================================================
# ADAPTER
# ============================================================================

class SMTLParser:
    """
    Adapts tree-sitter's Go syntax tree into an SMTL ``Program``.

    Grammar (as recognized here):
        program     ::= "package" "smtl" entry_point
        entry_point ::= "func" "main" "(" ")" "{" statement* "}"
        statement   ::= "var" names type | "assert" "(" expression ")"
    """

    def __init__(self):
        self._parser = Parser(GO_LANGUAGE)

    def parse(self, text: str, filename: str = "<string>") -> Program:
        """
        Parse SMTL text into a Program.

        Raises:
            ParseError: the text is not valid Go syntax
            UnsupportedModule: the package is not ``smtl``
        """
        tree = self._parser.parse(text.encode("utf-8"))
        root = tree.root_node

        if root.has_error:
            bad = _first_error(root) or root
            line, column = _location(bad)
            if bad.is_missing:
                raise ParseError(f"syntax error: missing {bad.type}", line, column)
            snippet = _text(bad).splitlines()[0][:40] if bad.text else ""
            raise ParseError(f"syntax error near '{snippet}'", line, column)

        try:
            return self._adapt_source_file(root, filename)
        except RecursionError:
            line, column = _location(root)
            raise ParseError(
                "Input too complex: Maximum nesting depth exceeded",
                line,
                column,
            )

    def parse_file(self, filepath: str) -> Program:
        """Parse SMTL file with strict UTF-8 encoding"""
        with open(filepath, 'r', encoding='utf-8') as f:
            text = f.read()
        return self.parse(text, filename=filepath)

    # ========================================================================
    # TOP LEVEL
    # ========================================================================

    def _adapt_source_file(self, root: Node, filename: str) -> Program:
        package_clause = next((n for n in _named(root) if n.type == "package_clause"), None)
        if package_clause is None:
            raise ParseError("expected 'package' clause", 1, 1)

        package_ident = next(
            (n for n in _named(package_clause) if n.type == "package_identifier"), None
        )
        package = _text(package_ident) if package_ident is not None else ""
        if package != SMTL_PACKAGE:
            raise UnsupportedModule(package, _location(package_clause))

        statements: List[Statement] = []
        for decl in _named(root):
            if self._is_entry_point(decl):
                body = decl.child_by_field_name("body")
                if body is not None:
                    statements = self._adapt_block(body)
                break

        return Program(
            package=package,
            statements=tuple(statements),
            filename=filename,
            location=_location(package_clause),
        )

    def _is_entry_point(self, decl: Node) -> bool:
        if decl.type != "function_declaration":
            return False
        name = decl.child_by_field_name("name")
        if name is None or _text(name) != ENTRY_POINT:
            return False
        params = decl.child_by_field_name("parameters")
        return params is None or not any(True for _ in _named(params))

    def _adapt_block(self, block: Node) -> List[Statement]:
        statements: List[Statement] = []
        for child in _named(block):
            # newer grammars wrap the body in a statement_list node
            if child.type == "statement_list":
                statements.extend(self._adapt_statement(s) for s in _named(child))
            else:
                statements.append(self._adapt_statement(child))
        return statements

    # ========================================================================
    # STATEMENTS
    # ========================================================================

    def _adapt_statement(self, node: Node) -> Statement:
        loc = _location(node)

        if node.type == "var_declaration":
            return self._adapt_var_declaration(node)

        if node.type == "expression_statement":
            inner = next(_named(node), None)
            if inner is None:
                return UnsupportedStatementNode(node.type, "empty expression statement", location=loc)
            return ExpressionStatement(self._adapt_expression(inner), location=loc)

        return UnsupportedStatementNode(node.type, location=loc)

    def _adapt_var_declaration(self, node: Node) -> Statement:
        loc = _location(node)
        specs: List[Node] = []
        for child in _named(node):
            if child.type == "var_spec":
                specs.append(child)
            elif child.type == "var_spec_list":
                specs.extend(s for s in _named(child) if s.type == "var_spec")

        if len(specs) != 1:
            return UnsupportedStatementNode(
                node.type,
                "a var declaration must declare exactly one type",
                location=loc,
            )

        spec = specs[0]
        names = [_text(n) for n in spec.children_by_field_name("name")]
        type_node = spec.child_by_field_name("type")
        value_node = spec.child_by_field_name("value")

        type_ref = None
        if type_node is not None:
            if type_node.type == "type_identifier":
                type_ref = TypeRef(type_node.type, _text(type_node), location=_location(type_node))
            else:
                type_ref = TypeRef(type_node.type, location=_location(type_node))

        return VarDeclaration(
            names=names,
            type=type_ref,
            has_initializer=value_node is not None,
            location=loc,
        )

    # ========================================================================
    # EXPRESSIONS
    # ========================================================================

    def _adapt_expression(self, node: Node) -> Expression:
        loc = _location(node)
        kind = node.type

        if kind in ("true", "false"):
            return BoolLiteral(kind == "true", location=loc)

        if kind == "int_literal":
            return IntLiteral(_text(node), location=loc)

        if kind in ("identifier", "type_identifier"):
            return Identifier(_text(node), location=loc)

        if kind == "binary_expression":
            return self._adapt_binary(node)

        if kind == "unary_expression":
            return UnaryOp(
                node.child_by_field_name("operator").type,
                self._adapt_expression(node.child_by_field_name("operand")),
                location=loc,
            )

        if kind == "parenthesized_expression":
            inner = next(_named(node), None)
            if inner is None:
                return UnsupportedExpressionNode(kind, _text(node), location=loc)
            return ParenExpr(self._adapt_expression(inner), location=loc)

        if kind == "call_expression":
            return self._adapt_call(node)

        return UnsupportedExpressionNode(kind, _text(node), location=loc)

    def _adapt_binary(self, node: Node) -> Expression:
        # left-associative chains are flattened iteratively
        chain: List[Node] = [node]
        while True:
            left = chain[-1].child_by_field_name("left")
            if left.type != "binary_expression":
                break
            chain.append(left)

        expr = self._adapt_expression(chain[-1].child_by_field_name("left"))
        for binary in reversed(chain):
            expr = BinaryOp(
                expr,
                binary.child_by_field_name("operator").type,
                self._adapt_expression(binary.child_by_field_name("right")),
                location=_location(binary),
            )
        return expr

    def _adapt_call(self, node: Node) -> Expression:
        loc = _location(node)
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        args = [self._adapt_expression(a) for a in _named(arguments)] if arguments is not None else []

        if function.type == "selector_expression":
            receiver = function.child_by_field_name("operand")
            method = function.child_by_field_name("field")
            return MethodCall(
                self._adapt_expression(receiver),
                _text(method),
                args,
                location=loc,
            )

        return Call(_text(function), args, location=loc)


def parse_smtl(text: str, filename: str = "<string>") -> Program:
    """Parse SMTL text into a Program"""
    parser = SMTLParser()
    return parser.parse(text, filename=filename)


def parse_smtl_file(filepath: str) -> Program:
    """Parse SMTL file into a Program"""
    parser = SMTLParser()
    return parser.parse_file(filepath)
