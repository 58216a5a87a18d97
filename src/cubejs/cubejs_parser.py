"""
cube.js Schema Parser

Parses cube.js schema source into an abstract syntax tree (AST).

This module implements a recursive-descent parser that pulls tokens one at a
time from `cubejs.cubejs_lexer.Lexer` and holds exactly one token of lookahead.
Tokens are consumed only through `Parser._eat`, so the lookahead invariant
holds between any two production calls. There is no backtracking and no
error recovery: the first violation aborts the parse.

Supported Constructs
--------------------
- Statements:
    * Empty statements: `;`
    * Blocks: `{ ... }`
    * Declarations: `let a = 1, b`, `var`, `const`
    * Returns: `return a + 1`
    * Functions: `function name(a, { b, c: d }) { ... }`
    * Expression statements: `cube(`orders`, { sql: `...` })`

- Expressions (loosest to tightest binding):
    * Assignment, right-associative: `a = b += 1`
    * Additive, left-associative: `1 + 2 - 3`
    * Primary: parenthesized expressions, object literals, identifiers and
      calls, spread `...x`, numeric and string literals

- Object literals:
    * `{ name: value }`, shorthand `{ name }`, computed keys `{ [name]: value }`
    * Spread-in properties `{ ...other }`

Statement Termination
---------------------
A statement ends on `;` or a LineBreak token. A `return` may also end right
before the `}` that closes its block. The lexer emits one LineBreak at end of
input, so the last statement of a file needs no explicit separator.

Entry Points
------------
- `Parser().parse(content)`: Parse a full program into a `Program` node.
- `parse(content)`: Same, on a fresh Parser.

Raises
------
SyntaxError
    Raised when an unexpected token or the end of input is met where a
    production needs something else.
AssertionError
    Raised when the lexer cannot produce even a first token.
"""

from __future__ import annotations

from collections.abc import Callable

from cubejs.cubejs_ast import (
    ASTNode,
    BlockStatement,
    EmptyExpression,
    ExpressionNode,
    FunctionCallExpressionNode,
    FunctionDeclarationNode,
    Identifier,
    NumericLiteral,
    ObjectDeclaration,
    ObjectDestructuringPropertyDeclaration,
    ObjectPropertyDeclaration,
    Program,
    ReturnStatement,
    StringLiteral,
    UnaryExpressionNode,
    VariableNode,
    VariableStatement,
)
from cubejs.cubejs_constants import ASSIGNMENT_TOKENS, DECLARATION_KEYWORDS, TokenType
from cubejs.cubejs_lexer import CharacterStream, Lexer, Token


class Parser:
    """
    cube.js Parser Class

    Responsible for transforming schema source into a `Program` tree. A Parser
    instance holds the lexer and lookahead of the parse in progress, so it must
    not be shared between concurrent parses; calling `parse` again starts over.

    Attributes
    ----------
    _content : str
        Source text of the current parse.
    _lookahead : Token | None
        The single token of lookahead; None once the input is exhausted.
    _lexer : Lexer | None
        Token source for the current parse.
    """

    def __init__(self) -> None:
        self._content: str = ""
        self._lookahead: Token | None = None
        self._lexer: Lexer | None = None

    def parse(self, content: str) -> Program:
        """Parse a full program and return its `Program` node."""
        self._content = content
        self._lexer = Lexer(CharacterStream(content, 0, 1, 1))
        self._lookahead = self._lexer.next_token()

        if self._lookahead is None:
            raise AssertionError("Lexer produced no tokens for the given input")

        return self.parse_program()

    def _eat(self, token_type: TokenType) -> Token:
        token = self._lookahead

        if token is None:
            raise SyntaxError(
                f'Unexpected end of input, expected "{token_type.value}"'
            )

        if token.type != token_type:
            raise SyntaxError(
                f'Unexpected token "{token.value}", expected "{token_type.value}" '
                f"at line {token.line}, col {token.col}"
            )

        assert self._lexer is not None  # for mypy
        self._lookahead = self._lexer.next_token()

        return token

    def _lookahead_type(self) -> TokenType | None:
        return self._lookahead.type if self._lookahead is not None else None

    def _position(self) -> dict[str, int]:
        if self._lookahead is None:
            return {}
        return {"line": self._lookahead.line, "col": self._lookahead.col}

    def eat_if_line_break(self) -> Token | None:
        if self._lookahead_type() == TokenType.LINE_BREAK:
            return self._eat(TokenType.LINE_BREAK)
        return None

    def eat_end_of_expression(self) -> Token:
        if self._lookahead_type() == TokenType.SEMICOLON:
            return self._eat(TokenType.SEMICOLON)
        return self._eat(TokenType.LINE_BREAK)

    # Statements

    def parse_program(self) -> Program:
        position = self._position()
        return Program(tuple(self.parse_statement_list()), **position)

    def parse_statement_list(self, stop_type: TokenType | None = None) -> list[ASTNode]:
        """Parse statements until `stop_type` (or end of input when unset).

        LineBreak tokens between statements are skipped. The loop body runs
        at least once, so callers check for an empty list themselves.
        """
        statements: list[ASTNode] = []

        while True:
            if self.eat_if_line_break() is None:
                statements.append(self.parse_statement())
            if self._lookahead is None or self._lookahead.type == stop_type:
                break

        return statements

    def parse_statement(self) -> ASTNode:
        match self._lookahead_type():
            case TokenType.SEMICOLON:
                return self.parse_empty_statement()
            case TokenType.CURLY_BRACKET_OPEN:
                return self.parse_block_statement()
            case TokenType.LET_KEYWORD | TokenType.VAR_KEYWORD | TokenType.CONST_KEYWORD:
                return self.parse_variable_statement()
            case TokenType.RETURN_KEYWORD:
                return self.parse_return_statement()
            case TokenType.FUNCTION_KEYWORD:
                return self.parse_function_statement()
            case _:
                return self.parse_expression_statement()

    def parse_empty_statement(self) -> EmptyExpression:
        token = self._eat(TokenType.SEMICOLON)
        return EmptyExpression(line=token.line, col=token.col)

    def parse_block_statement(self) -> BlockStatement:
        token = self._eat(TokenType.CURLY_BRACKET_OPEN)
        body: list[ASTNode] = []
        if self._lookahead_type() != TokenType.CURLY_BRACKET_CLOSE:
            body = self.parse_statement_list(TokenType.CURLY_BRACKET_CLOSE)
        self._eat(TokenType.CURLY_BRACKET_CLOSE)

        return BlockStatement(tuple(body), line=token.line, col=token.col)

    def parse_return_statement(self) -> ReturnStatement:
        token = self._eat(TokenType.RETURN_KEYWORD)
        value = self.parse_additive_expression()

        # The closing brace of the enclosing block also ends a return.
        if self._lookahead_type() != TokenType.CURLY_BRACKET_CLOSE:
            self.eat_end_of_expression()

        return ReturnStatement(value, line=token.line, col=token.col)

    def parse_variable_statement(self) -> VariableStatement:
        keyword_type = self._lookahead_type()
        assert keyword_type in DECLARATION_KEYWORDS  # for mypy
        keyword = self._eat(keyword_type)

        variables: list[VariableNode] = []
        while True:
            while self.eat_if_line_break() is not None:
                pass
            variables.append(self.parse_variable_expression())
            if self._lookahead_type() != TokenType.COMMA:
                break
            self._eat(TokenType.COMMA)

        self.eat_end_of_expression()

        return VariableStatement(
            keyword, tuple(variables), line=keyword.line, col=keyword.col
        )

    def parse_variable_expression(self) -> VariableNode:
        identifier = self._eat(TokenType.IDENTIFIER)
        initializer = None

        if self._lookahead_type() == TokenType.SIMPLE_ASSIGNMENT_OPERATOR:
            self._eat(TokenType.SIMPLE_ASSIGNMENT_OPERATOR)
            initializer = self.parse_expression()

        return VariableNode(
            identifier.value, initializer, line=identifier.line, col=identifier.col
        )

    def parse_expression_statement(self) -> ASTNode:
        expression = self.parse_expression()
        self.eat_end_of_expression()
        return expression

    def parse_function_statement(self) -> FunctionDeclarationNode:
        token = self._eat(TokenType.FUNCTION_KEYWORD)
        identifier = self.parse_identifier()
        self._eat(TokenType.ROUND_BRACKET_OPEN)
        params = self.parse_function_parameter_list(self.parse_parameter_declaration)
        self._eat(TokenType.ROUND_BRACKET_CLOSE)

        if self._lookahead_type() != TokenType.CURLY_BRACKET_OPEN:
            found = "end of input" if self._lookahead is None else f'"{self._lookahead.value}"'
            raise SyntaxError(
                f'Function "{identifier.value}" body must start with "{{", got {found}'
            )

        body = self.parse_block_statement().body

        return FunctionDeclarationNode(
            identifier.value, tuple(params), body, line=token.line, col=token.col
        )

    def parse_function_parameter_list(
        self, declaration: Callable[[], ASTNode]
    ) -> list[ASTNode]:
        """Comma separated elements up to `)`; a trailing comma is tolerated."""
        params: list[ASTNode] = []
        while self._lookahead_type() != TokenType.ROUND_BRACKET_CLOSE:
            params.append(declaration())
            if self._lookahead_type() == TokenType.COMMA:
                self._eat(TokenType.COMMA)

        return params

    def parse_parameter_declaration(self) -> ASTNode:
        if self._lookahead_type() == TokenType.IDENTIFIER:
            return self.parse_identifier()
        return self.parse_object_declaration(destructuring=True)

    def parse_parameter_declaration_for_call(self) -> ASTNode:
        return self.parse_additive_expression()

    # Expressions

    def parse_expression(self) -> ASTNode:
        return self.parse_assignment_expression()

    def parse_assignment_expression(self) -> ASTNode:
        left = self.parse_additive_expression()

        if self._lookahead is not None and self._lookahead.type in ASSIGNMENT_TOKENS:
            operator = self._eat(self._lookahead.type)
            return ExpressionNode(
                operator,
                left,
                self.parse_assignment_expression(),
                line=left.line,
                col=left.col,
            )

        return left

    def parse_additive_expression(self) -> ASTNode:
        left = self.parse_primary_expression()

        while self._lookahead_type() == TokenType.ADDITIVE_OPERATOR:
            operator = self._eat(TokenType.ADDITIVE_OPERATOR)
            right = self.parse_primary_expression()
            left = ExpressionNode(operator, left, right, line=left.line, col=left.col)

        return left

    def parse_primary_expression(self) -> ASTNode:
        match self._lookahead_type():
            case TokenType.ROUND_BRACKET_OPEN:
                return self.parse_parenthesized_expression()
            case TokenType.CURLY_BRACKET_OPEN:
                return self.parse_object_declaration()
            case TokenType.IDENTIFIER:
                return self.parse_callable_identifier()
            case TokenType.SPREAD:
                return self.parse_spread_expression()
            case _:
                return self.parse_literal()

    def parse_parenthesized_expression(self) -> ASTNode:
        self._eat(TokenType.ROUND_BRACKET_OPEN)
        expression = self.parse_expression()
        self._eat(TokenType.ROUND_BRACKET_CLOSE)
        return expression

    def parse_spread_expression(self) -> UnaryExpressionNode:
        token = self._eat(TokenType.SPREAD)
        return UnaryExpressionNode(
            token, self.parse_additive_expression(), line=token.line, col=token.col
        )

    def parse_callable_identifier(self) -> ASTNode:
        identifier = self.parse_identifier()

        if self._lookahead_type() == TokenType.ROUND_BRACKET_OPEN:
            self._eat(TokenType.ROUND_BRACKET_OPEN)
            args = self.parse_function_parameter_list(
                self.parse_parameter_declaration_for_call
            )
            self._eat(TokenType.ROUND_BRACKET_CLOSE)
            return FunctionCallExpressionNode(
                identifier.value, tuple(args), line=identifier.line, col=identifier.col
            )

        return identifier

    def parse_identifier(self) -> Identifier:
        token = self._eat(TokenType.IDENTIFIER)
        return Identifier(token.value, line=token.line, col=token.col)

    # Objects

    def parse_object_declaration(self, destructuring: bool = False) -> ObjectDeclaration:
        token = self._eat(TokenType.CURLY_BRACKET_OPEN)
        properties: list[ASTNode] = []

        while self._lookahead_type() != TokenType.CURLY_BRACKET_CLOSE:
            if self.eat_if_line_break() is not None:
                continue
            if destructuring:
                properties.append(self.parse_object_destructuring_property_declaration())
            else:
                properties.append(self.parse_object_property_declaration())

        self._eat(TokenType.CURLY_BRACKET_CLOSE)

        return ObjectDeclaration(
            tuple(properties), destructuring, line=token.line, col=token.col
        )

    def parse_object_destructuring_property_declaration(
        self,
    ) -> ObjectDestructuringPropertyDeclaration:
        identifier = self.parse_identifier()
        alias = None

        if self._lookahead_type() == TokenType.COLON:
            self._eat(TokenType.COLON)
            alias = self.parse_identifier().value

        if self._lookahead_type() == TokenType.COMMA:
            self._eat(TokenType.COMMA)

        return ObjectDestructuringPropertyDeclaration(
            identifier.value, alias, line=identifier.line, col=identifier.col
        )

    def parse_object_property_declaration(self) -> ObjectPropertyDeclaration:
        position = self._position()

        if self._lookahead_type() == TokenType.SPREAD:
            prop = ObjectPropertyDeclaration(
                init=self.parse_primary_expression(), **position
            )
        else:
            identifier = self.parse_object_property_identifier()
            init = None
            if self._lookahead_type() == TokenType.COLON:
                self._eat(TokenType.COLON)
                init = self.parse_additive_expression()
            prop = ObjectPropertyDeclaration(identifier.value, init, **position)

        if self._lookahead_type() == TokenType.COMMA:
            self._eat(TokenType.COMMA)

        return prop

    def parse_object_property_identifier(self) -> Identifier:
        # Computed keys resolve to the same Identifier as plain keys.
        if self._lookahead_type() == TokenType.SQUARE_BRACKET_OPEN:
            self._eat(TokenType.SQUARE_BRACKET_OPEN)
            identifier = self.parse_identifier()
            self._eat(TokenType.SQUARE_BRACKET_CLOSE)
            return identifier

        return self.parse_identifier()

    # Literals

    def parse_literal(self) -> ASTNode:
        match self._lookahead_type():
            case TokenType.NUMBER:
                return self.parse_numeric_literal()
            case TokenType.STRING:
                return self.parse_string_literal()
            case None:
                raise SyntaxError("Unexpected end of input, expected a literal")
            case _:
                assert self._lookahead is not None  # for mypy
                raise SyntaxError(
                    f'Unexpected token "{self._lookahead.value}" '
                    f"({self._lookahead.type.value}), expected a literal "
                    f"at line {self._lookahead.line}, col {self._lookahead.col}"
                )

    def parse_numeric_literal(self) -> NumericLiteral:
        token = self._eat(TokenType.NUMBER)
        value: int | float = float(token.value) if "." in token.value else int(token.value)
        return NumericLiteral(value, line=token.line, col=token.col)

    def parse_string_literal(self) -> StringLiteral:
        token = self._eat(TokenType.STRING)
        return StringLiteral(token.value[1:-1], line=token.line, col=token.col)


def parse(content: str) -> Program:
    """Parse `content` on a fresh Parser."""
    return Parser().parse(content)


__all__ = ["Parser", "parse"]
