"""
Defines the abstract syntax tree (AST) node variants for the cube.js schema language.

Every syntactic construct has its own frozen dataclass carrying exactly the
fields it needs, so a node's kind always determines its shape. Child
sequences are tuples: they are never None, and an absent list is an empty tuple.

Classes:
    NodeType: Enumeration of every node kind.
    ASTNode: Common base providing source position, `to_dict()` and `walk()`.
    ASTDict: TypedDict describing the common keys of a serialized node.
    Program, BlockStatement, EmptyExpression, VariableStatement, ReturnStatement,
    Identifier, NumericLiteral, StringLiteral, ObjectDeclaration,
    ObjectPropertyDeclaration, ObjectDestructuringPropertyDeclaration,
    ExpressionNode, UnaryExpressionNode, FunctionDeclarationNode,
    FunctionCallExpressionNode, VariableNode: The node variants.

Usage:
    Nodes are built by `cubejs.cubejs_parser.Parser` and are never mutated
    afterwards. Position fields (`line`, `col`) are keyword-only and excluded
    from equality, so trees parsed from the same source compare equal and
    tests can build expected trees without positions.

Example:
    ExpressionNode(Token(TokenType.ADDITIVE_OPERATOR, "+"), NumericLiteral(1), NumericLiteral(2))
"""

from collections.abc import Iterator
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, TypedDict

from cubejs.cubejs_lexer import Token


class NodeType(str, Enum):
    PROGRAM = "Program"
    BLOCK_STATEMENT = "BlockStatement"
    EMPTY_EXPRESSION = "EmptyExpression"
    VARIABLE_STATEMENT = "VariableStatement"
    RETURN_STATEMENT = "ReturnStatement"
    IDENTIFIER = "Identifier"
    NUMERIC_LITERAL = "NumericLiteral"
    STRING_LITERAL = "StringLiteral"
    OBJECT_DECLARATION = "ObjectDeclaration"
    OBJECT_PROPERTY_DECLARATION = "ObjectPropertyDeclaration"
    OBJECT_DESTRUCTURING_PROPERTY_DECLARATION = "ObjectDestructuringPropertyDeclaration"
    EXPRESSION = "Expression"
    UNARY_EXPRESSION = "UnaryExpression"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_CALL_EXPRESSION = "FunctionCallExpression"
    VARIABLE = "Variable"


class ASTDict(TypedDict, total=False):
    """
    Common keys of a serialized AST node.

    Fields:
        type (str): The node kind (a `NodeType` value).
        line (int): Line number where the node starts.
        col (int): Column number where the node starts.

    Variant fields (e.g. `body`, `name`, `left`) are added under their own names.
    """

    type: str
    line: int
    col: int


def _serialize(value: Any) -> Any:
    if isinstance(value, ASTNode):
        return value.to_dict()
    if isinstance(value, Token):
        return {"type": value.type.value, "value": value.value}
    if isinstance(value, tuple):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class ASTNode:
    """
    Base class of every node variant.

    Attributes:
        kind (NodeType): The node kind, fixed per variant.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
    """

    kind: ClassVar[NodeType]

    line: int = field(default=0, compare=False, kw_only=True)
    col: int = field(default=0, compare=False, kw_only=True)

    def to_dict(self) -> ASTDict:
        """Converts the node and all descendants into plain dicts and lists."""
        d: dict[str, Any] = {"type": self.kind.value}
        for f in fields(self):
            d[f.name] = _serialize(getattr(self, f.name))
        return d  # type: ignore[return-value]

    def children(self) -> Iterator["ASTNode"]:
        """Yields the direct child nodes in field order."""
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, ASTNode):
                yield value
            elif isinstance(value, tuple):
                yield from (v for v in value if isinstance(v, ASTNode))

    def walk(self) -> Iterator["ASTNode"]:
        """Pre-order traversal of the subtree rooted at this node."""
        yield self
        for child in self.children():
            yield from child.walk()


@dataclass(frozen=True)
class Program(ASTNode):
    kind: ClassVar[NodeType] = NodeType.PROGRAM

    body: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class BlockStatement(ASTNode):
    kind: ClassVar[NodeType] = NodeType.BLOCK_STATEMENT

    body: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class EmptyExpression(ASTNode):
    """A lone `;`."""

    kind: ClassVar[NodeType] = NodeType.EMPTY_EXPRESSION


@dataclass(frozen=True)
class Identifier(ASTNode):
    kind: ClassVar[NodeType] = NodeType.IDENTIFIER

    value: str


@dataclass(frozen=True)
class NumericLiteral(ASTNode):
    kind: ClassVar[NodeType] = NodeType.NUMERIC_LITERAL

    value: int | float


@dataclass(frozen=True)
class StringLiteral(ASTNode):
    """String contents without the quote delimiters, escapes kept verbatim."""

    kind: ClassVar[NodeType] = NodeType.STRING_LITERAL

    value: str


@dataclass(frozen=True)
class VariableNode(ASTNode):
    kind: ClassVar[NodeType] = NodeType.VARIABLE

    name: str
    initializer: ASTNode | None = None


@dataclass(frozen=True)
class VariableStatement(ASTNode):
    """`let`/`var`/`const` followed by one or more declarations."""

    kind: ClassVar[NodeType] = NodeType.VARIABLE_STATEMENT

    keyword: Token
    body: tuple[VariableNode, ...] = ()


@dataclass(frozen=True)
class ReturnStatement(ASTNode):
    kind: ClassVar[NodeType] = NodeType.RETURN_STATEMENT

    value: ASTNode


@dataclass(frozen=True)
class ObjectPropertyDeclaration(ASTNode):
    """
    One property of an object literal.

    `name` is None for a spread-in property (`...other`); `init` is None for
    shorthand properties (`{ name }`).
    """

    kind: ClassVar[NodeType] = NodeType.OBJECT_PROPERTY_DECLARATION

    name: str | None = None
    init: ASTNode | None = None


@dataclass(frozen=True)
class ObjectDestructuringPropertyDeclaration(ASTNode):
    """A `name` or `name: alias` entry of a destructuring parameter."""

    kind: ClassVar[NodeType] = NodeType.OBJECT_DESTRUCTURING_PROPERTY_DECLARATION

    name: str
    alias: str | None = None


@dataclass(frozen=True)
class ObjectDeclaration(ASTNode):
    """An object literal, or a destructuring pattern when `destructuring` is set."""

    kind: ClassVar[NodeType] = NodeType.OBJECT_DECLARATION

    body: tuple[ASTNode, ...] = ()
    destructuring: bool = False


@dataclass(frozen=True)
class ExpressionNode(ASTNode):
    """Binary additive expression or assignment; the operator token is kept verbatim."""

    kind: ClassVar[NodeType] = NodeType.EXPRESSION

    operator: Token
    left: ASTNode
    right: ASTNode


@dataclass(frozen=True)
class UnaryExpressionNode(ASTNode):
    kind: ClassVar[NodeType] = NodeType.UNARY_EXPRESSION

    operator: Token
    operand: ASTNode


@dataclass(frozen=True)
class FunctionDeclarationNode(ASTNode):
    kind: ClassVar[NodeType] = NodeType.FUNCTION_DECLARATION

    name: str
    params: tuple[ASTNode, ...] = ()
    body: tuple[ASTNode, ...] = ()


@dataclass(frozen=True)
class FunctionCallExpressionNode(ASTNode):
    kind: ClassVar[NodeType] = NodeType.FUNCTION_CALL_EXPRESSION

    name: str
    args: tuple[ASTNode, ...] = ()


__all__ = [
    "ASTDict",
    "ASTNode",
    "BlockStatement",
    "EmptyExpression",
    "ExpressionNode",
    "FunctionCallExpressionNode",
    "FunctionDeclarationNode",
    "Identifier",
    "NodeType",
    "NumericLiteral",
    "ObjectDeclaration",
    "ObjectDestructuringPropertyDeclaration",
    "ObjectPropertyDeclaration",
    "Program",
    "ReturnStatement",
    "StringLiteral",
    "UnaryExpressionNode",
    "VariableNode",
    "VariableStatement",
]
