"""
Token vocabulary for the cube.js schema language.

Defines the closed set of token kinds produced by the lexer and consumed by the
parser, plus the lookup tables the lexer uses to classify raw source text.

Exports:
    - TokenType: Enumeration of every token kind the grammar understands.
    - token_hashmap: Operator and punctuation lexemes mapped to their token kind.
    - ADDITIVE_OPERATORS: Lexemes of the additive operators.
    - keyword_tokens: Reserved words mapped to their token kind.
    - DECLARATION_KEYWORDS: Token kinds that open a variable statement.
    - ASSIGNMENT_TOKENS: Token kinds accepted as assignment operators.
"""

from enum import Enum


class TokenType(str, Enum):
    """Every token kind emitted by the lexer.

    Punctuation members use their lexeme as value so that error messages can
    name the expected token the way it appears in source.
    """

    SEMICOLON = ";"
    LINE_BREAK = "LineBreak"
    CURLY_BRACKET_OPEN = "{"
    CURLY_BRACKET_CLOSE = "}"
    ROUND_BRACKET_OPEN = "("
    ROUND_BRACKET_CLOSE = ")"
    SQUARE_BRACKET_OPEN = "["
    SQUARE_BRACKET_CLOSE = "]"
    COMMA = ","
    COLON = ":"
    SPREAD = "..."
    ADDITIVE_OPERATOR = "AdditiveOperator"
    SIMPLE_ASSIGNMENT_OPERATOR = "SimpleAssignmentOperator"
    COMPLEX_ASSIGNMENT_OPERATOR = "ComplexAssignmentOperator"
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    STRING = "String"
    LET_KEYWORD = "let"
    VAR_KEYWORD = "var"
    CONST_KEYWORD = "const"
    RETURN_KEYWORD = "return"
    FUNCTION_KEYWORD = "function"


ADDITIVE_OPERATORS: frozenset[str] = frozenset({"+", "-"})

# Longest match wins in the lexer, so "+=" beats "+" and "..." is one token.
token_hashmap: dict[str, TokenType] = {
    ";": TokenType.SEMICOLON,
    "{": TokenType.CURLY_BRACKET_OPEN,
    "}": TokenType.CURLY_BRACKET_CLOSE,
    "(": TokenType.ROUND_BRACKET_OPEN,
    ")": TokenType.ROUND_BRACKET_CLOSE,
    "[": TokenType.SQUARE_BRACKET_OPEN,
    "]": TokenType.SQUARE_BRACKET_CLOSE,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    "...": TokenType.SPREAD,
    "=": TokenType.SIMPLE_ASSIGNMENT_OPERATOR,
    "+=": TokenType.COMPLEX_ASSIGNMENT_OPERATOR,
    "-=": TokenType.COMPLEX_ASSIGNMENT_OPERATOR,
    "*=": TokenType.COMPLEX_ASSIGNMENT_OPERATOR,
    "/=": TokenType.COMPLEX_ASSIGNMENT_OPERATOR,
    "%=": TokenType.COMPLEX_ASSIGNMENT_OPERATOR,
}
token_hashmap.update({op: TokenType.ADDITIVE_OPERATOR for op in ADDITIVE_OPERATORS})

keyword_tokens: dict[str, TokenType] = {
    "let": TokenType.LET_KEYWORD,
    "var": TokenType.VAR_KEYWORD,
    "const": TokenType.CONST_KEYWORD,
    "return": TokenType.RETURN_KEYWORD,
    "function": TokenType.FUNCTION_KEYWORD,
}

DECLARATION_KEYWORDS: frozenset[TokenType] = frozenset(
    {TokenType.LET_KEYWORD, TokenType.VAR_KEYWORD, TokenType.CONST_KEYWORD}
)

ASSIGNMENT_TOKENS: frozenset[TokenType] = frozenset(
    {TokenType.SIMPLE_ASSIGNMENT_OPERATOR, TokenType.COMPLEX_ASSIGNMENT_OPERATOR}
)

__all__ = [
    "ADDITIVE_OPERATORS",
    "ASSIGNMENT_TOKENS",
    "DECLARATION_KEYWORDS",
    "TokenType",
    "keyword_tokens",
    "token_hashmap",
]
