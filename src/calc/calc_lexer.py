"""
Lexical analyzer for CALC expressions.

This module converts one line of input into typed tokens on demand:

Classes:
    CharacterStream: Push-back character buffer with 1-based position tracking.
    Lexer: Pull-based tokenizer with one-token lookahead.

Features:
    - Skips whitespace before every token
    - Recognizes:
        * Integer and float literals (`42`, `3.14`)
        * Words: constants (`e`, `pi`, `rand`), function names, the `make`
          keyword, and plain identifiers
        * Arithmetic (`+ - * / % ^`), bitwise (`& | $`), shift (`<< >>`) and
          negation (`~`) operators, and parentheses

The lexer never raises: unrecognized symbols become UNDEFINED tokens that the
parser rejects with a positioned error.

Example:
    >>> lexer = Lexer(CharacterStream("make x 42"))
    >>> lexer.next_token()
    Token(ASSIGNMENT, make)

Exports:
    - CharacterStream
    - Lexer
"""

from calc.calc_constants import (
    ASSIGN_KEYWORD,
    CLOSE_PAREN,
    DECIMAL_POINT,
    OPEN_PAREN,
    arithmetic_set,
    binary_set,
    constant_set,
    function_set,
    logical_set,
    unary_set,
)
from calc.calc_token import Token, TokenKind


def _is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def _is_alpha(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


class CharacterStream:
    """
    Reads characters from a string with push-back support.

    Attributes:
        source (str): The input line.
        position (int): Index of the next character to read (0-based).
    """

    def __init__(self, source: str, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Returns:
            str: The next character, or an empty string at end of input.
        """
        if self.position >= len(self.source):
            return ""
        char = self.source[self.position]
        self.position += 1
        return char

    def back(self) -> bool:
        """Pushes the most recently read character back onto the stream."""
        if self.position == 0:
            return False
        self.position -= 1
        return True

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def reset(self) -> None:
        self.position = 0


class Lexer:
    """Pull-based lexer for CALC.

    The lexer holds exactly one current token, exposed through `kind`, `text`
    and `position`. `next()` replaces it with the following token.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        kind (TokenKind): Kind of the current token (BEGIN before the first `next()`).
        text (str): Lexeme of the current token.
        start (int): 0-based offset of the current token in the source.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.kind = TokenKind.BEGIN
        self.text = ""
        self.start = 0

    @classmethod
    def from_source(cls, source: str) -> "Lexer":
        return cls(CharacterStream(source))

    @property
    def position(self) -> int:
        """1-based offset of the current token; input length + 1 at END."""
        return self.start + 1

    def has_next(self) -> bool:
        return self.kind is not TokenKind.END

    def token(self) -> Token:
        """Returns the current token as a detached Token."""
        return Token(self.kind, self.text)

    def reset(self) -> None:
        """Rewinds to the first token of the input."""
        self.stream.reset()
        self.kind = TokenKind.BEGIN
        self.text = ""
        self.next()

    def skip_whitespace(self) -> None:
        while not self.stream.end_of_file() and self.stream.peek().isspace():
            self.stream.next()

    def next(self) -> bool:
        """Advances the lexer one token forward.

        Returns:
            bool: False once the END token has been produced.
        """
        self.skip_whitespace()
        self.text = ""
        self.start = self.stream.position

        ch = self.stream.peek()
        if ch == "":
            self.kind = TokenKind.END
            return False
        if _is_digit(ch):
            self.number()
        elif _is_alpha(ch):
            self.phrase()
        else:
            self.symbol()
        return True

    def next_token(self) -> Token:
        """Advances and returns the new current token."""
        self.next()
        return self.token()

    def number(self) -> None:
        """Reads an integer literal, or a float literal if a decimal point follows."""
        self.kind = TokenKind.INTEGER
        self.text = self._read_digits()
        if self.stream.peek() == DECIMAL_POINT:
            self.kind = TokenKind.FLOAT
            self.text += self.stream.next() + self._read_digits()

    def _read_digits(self) -> str:
        digits = ""
        while _is_digit(self.stream.peek()):
            digits += self.stream.next()
        return digits

    def phrase(self) -> None:
        """Reads a word and classifies it as constant, function, keyword or identifier."""
        word = ""
        while True:
            ch = self.stream.peek()
            if not (_is_alpha(ch) or _is_digit(ch)):
                break
            word += self.stream.next()
        self.text = word

        if word in constant_set:
            self.kind = TokenKind.CONSTANT
        elif word in function_set:
            self.kind = TokenKind.FUNCTION
        elif word == ASSIGN_KEYWORD:
            self.kind = TokenKind.ASSIGNMENT
        else:
            self.kind = TokenKind.STRING

    def symbol(self) -> None:
        """Reads a one- or two-character symbol."""
        ch = self.stream.next()
        self.text = ch

        if ch in arithmetic_set:
            self.kind = TokenKind.OP
        elif ch in binary_set:
            self.kind = TokenKind.BINARY_OP
        elif ch in unary_set:
            self.kind = TokenKind.UNARY_OP
        elif ch == OPEN_PAREN:
            self.kind = TokenKind.OPENING_PAREN
        elif ch == CLOSE_PAREN:
            self.kind = TokenKind.CLOSING_PAREN
        else:
            # Shift operators need one extra character of lookahead
            following = self.stream.next()
            if following and ch + following in logical_set:
                self.kind = TokenKind.LOGICAL_OP
                self.text = ch + following
            else:
                if following:
                    self.stream.back()
                self.kind = TokenKind.UNDEFINED

    def __repr__(self) -> str:
        return f"Lexer({self.kind.name}, {self.text!r}, position={self.position})"


__all__ = ["CharacterStream", "Lexer"]
