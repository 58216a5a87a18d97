"""
Lexical analyzer for the cube.js schema language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens, pulled one at a time.

Features:
    - Skips spaces, tabs, `//` line comments and `/* */` block comments
    - Collapses runs of newlines into a single LineBreak token
    - Emits one implicit LineBreak at end of input so the last statement is terminated
    - Supports longest-match recognition of operators and punctuation
    - Recognizes:
        * Identifiers and keywords (`let`, `var`, `const`, `return`, `function`)
        * Decimal numbers (integer and fraction)
        * Strings quoted with `'`, `"` or backticks (delimiters kept in the token value)

Raises:
    SyntaxError: On malformed numbers, unterminated strings or comments, and unknown characters.

Example:
    >>> lexer = Lexer(CharacterStream("let a = 1"))
    >>> lexer.next_token()
    Token(let, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
"""

import string
from dataclasses import dataclass, field

from cubejs.cubejs_constants import TokenType, keyword_tokens, token_hashmap

IDENTIFIER_START = frozenset(string.ascii_letters + "_$")
IDENTIFIER_CHARS = IDENTIFIER_START | frozenset(string.digits)
DIGITS = frozenset(string.digits)


class CharacterStream:
    """
    A utility for reading characters from a string source with line and column tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Tokens compare equal on `type` and `value`; the position is carried for
    error reporting only.

    Attributes:
        type (TokenType): The token kind.
        value (str): The raw source text of the token.
        line (int): The 1-based line number where the token starts.
        col (int): The 1-based column number where the token starts.
    """

    type: TokenType
    value: str
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value})"


class Lexer:
    """Pull-style tokenizer for cube.js schema files.

    The parser asks for one token at a time through `next_token`; the lexer
    never reads ahead of what it returns.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self._last_type: TokenType | None = None
        self._finished = False

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> bool:
        """Skips blanks and comments.

        Returns:
            bool: True if a newline was crossed while skipping.
        """
        crossed_newline = False
        while not self.stream.end_of_file():
            ch = self.peek()
            if ch in " \t\r\n":
                crossed_newline = crossed_newline or ch == "\n"
                self.advance()
            elif ch == "/" and self.stream.peek(1) == "/":
                self.skip_comment()
            elif ch == "/" and self.stream.peek(1) == "*":
                crossed_newline = self.skip_block_comment() or crossed_newline
            else:
                break
        return crossed_newline

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a `//` comment line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def skip_block_comment(self) -> bool:
        """Advances past a `/* ... */` comment, reporting whether it spanned lines."""
        line, col = self.stream.line, self.stream.column
        self.advance()
        self.advance()
        crossed_newline = False
        while not self.stream.end_of_file():
            if self.peek() == "*" and self.stream.peek(1) == "/":
                self.advance()
                self.advance()
                return crossed_newline
            if self.advance() == "\n":
                crossed_newline = True
        raise SyntaxError(f"Unterminated comment at line {line}, col {col}")

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position."""
        line, col = self.stream.line, self.stream.column
        max_token = None
        match_len = 0
        candidate = ""

        for i in range(3):  # longest lexeme is "..."
            ch = self.stream.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in token_hashmap:
                max_token = candidate
                match_len = i + 1

        if max_token:
            for _ in range(match_len):
                self.advance()
            return Token(token_hashmap[max_token], max_token, line, col)

        return None

    def next_token(self) -> Token | None:
        """Returns the next Token, or None once the input is exhausted."""
        token = self._scan()
        if token is not None:
            self._last_type = token.type
        return token

    def _line_break(self, line: int, col: int) -> Token | None:
        # Runs of blank lines collapse into the LineBreak already emitted.
        if self._last_type == TokenType.LINE_BREAK:
            return None
        return Token(TokenType.LINE_BREAK, "\n", line, col)

    def _scan(self) -> Token | None:
        if self._finished:
            return None

        line, col = self.stream.line, self.stream.column
        if self.skip_whitespace():
            token = self._line_break(line, col)
            if token is not None:
                return token

        if self.stream.end_of_file():
            self._finished = True
            return self._line_break(self.stream.line, self.stream.column)

        ch = self.peek()
        line, col = self.stream.line, self.stream.column

        # 1. Identifier or keyword
        if ch in IDENTIFIER_START:
            ident = ""
            while not self.stream.end_of_file() and (
                self.peek() in IDENTIFIER_CHARS
            ):
                ident += self.advance()
            if ident in keyword_tokens:
                return Token(keyword_tokens[ident], ident, line, col)
            return Token(TokenType.IDENTIFIER, ident, line, col)

        # 2. Decimal number
        if ch in DIGITS:
            num = ""
            has_dot = False
            while not self.stream.end_of_file() and (
                self.peek() in DIGITS
                or (self.peek() == "." and self.stream.peek(1) in DIGITS)
            ):
                if self.peek() == ".":
                    if has_dot:
                        raise SyntaxError(
                            f"Invalid number format at line {line}, col {col}"
                        )
                    has_dot = True
                num += self.advance()
            return Token(TokenType.NUMBER, num, line, col)

        # 3. String, delimiters kept
        if ch in ('"', "'", "`"):
            quote = self.advance()
            val = quote
            while not self.stream.end_of_file():
                if self.peek() == "\\":
                    val += self.advance()
                    if not self.stream.end_of_file():
                        val += self.advance()
                elif self.peek() == quote:
                    break
                else:
                    val += self.advance()
            if self.peek() == quote:
                val += self.advance()
                return Token(TokenType.STRING, val, line, col)
            raise SyntaxError(f"Unterminated string at line {line}, col {col}")

        # 4. Operator or punctuation
        token = self.match_operator()
        if token:
            return token

        raise SyntaxError(f"Unexpected character {ch!r} at line {line}, col {col}")


def tokenize(source: str) -> list[Token]:
    """Drains a fresh lexer over `source` into a list of tokens."""
    lexer = Lexer(CharacterStream(source, 0, 1, 1))
    tokens = []
    while True:
        tok = lexer.next_token()
        if tok is None:
            break
        tokens.append(tok)
    return tokens


__all__ = ["CharacterStream", "Lexer", "Token", "tokenize"]
