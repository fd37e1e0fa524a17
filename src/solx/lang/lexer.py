"""Lexer: turns SOL-X source text into a list of tokens."""

from dataclasses import dataclass
from typing import List, Optional, Union

from ..errors import ParseError, SyntaxIssue


@dataclass
class Token:
    type: str
    value: Union[str, int, bool, None] = None
    line: int = 1
    column: int = 1

    def describe(self) -> str:
        """Short form used in error messages."""
        if self.type == "EOF":
            return "end of input"
        if self.type == "IDENT":
            return f"'{self.value}'"
        if self.type == "STRING":
            return f'string "{self.value}"'
        if self.type in ("INT", "BOOL"):
            return f"literal {str(self.value).lower()}"
        return f"'{SYMBOL_TEXT.get(self.type, self.type)}'"


# Two-character operators are matched before single characters
DOUBLE_CHAR_TOKENS = {
    "==": "EQ",
    "!=": "NE",
    "<=": "LE",
    ">=": "GE",
    "&&": "AND",
    "||": "OR",
    "+=": "PLUS_ASSIGN",
    "-=": "MINUS_ASSIGN",
    "*=": "STAR_ASSIGN",
    "/=": "SLASH_ASSIGN",
    "%=": "PERCENT_ASSIGN",
}

SINGLE_CHAR_TOKENS = {
    "{": "LBRACE",
    "}": "RBRACE",
    "(": "LPAREN",
    ")": "RPAREN",
    "<": "LT",
    ">": "GT",
    ":": "COLON",
    ",": "COMMA",
    ".": "DOT",
    "=": "ASSIGN",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "%": "PERCENT",
    "!": "BANG",
}

SYMBOL_TEXT = {name: text for text, name in {**DOUBLE_CHAR_TOKENS, **SINGLE_CHAR_TOKENS}.items()}

ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


# Identifiers and numbers are ASCII only; other characters are reported as unexpected
def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_ident_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def is_ident_char(ch: str) -> bool:
    return is_ident_start(ch) or is_digit(ch)


class Lexer:
    """
    Single-pass lexer over SOL-X source.

    Newlines are insignificant. Keywords are not special here: they come
    out as IDENT tokens and the parser checks their value where the
    grammar needs one. Integer literals are always non-negative; a leading
    ``-`` is its own MINUS token.
    """

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 1
        self.issues: List[SyntaxIssue] = []

    @property
    def current_char(self) -> Optional[str]:
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek(self) -> Optional[str]:
        nxt = self.pos + 1
        if nxt >= len(self.text):
            return None
        return self.text[nxt]

    def advance(self):
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1

    def error(self, message: str, line: int, column: int):
        self.issues.append(SyntaxIssue(message, line, column))

    def skip_comment(self):
        while self.current_char is not None and self.current_char != "\n":
            self.advance()

    def read_identifier(self) -> Token:
        start_line, start_col = self.line, self.column
        start = self.pos
        while self.current_char is not None and is_ident_char(self.current_char):
            self.advance()
        word = self.text[start:self.pos]
        if word == "true":
            return Token("BOOL", True, start_line, start_col)
        if word == "false":
            return Token("BOOL", False, start_line, start_col)
        return Token("IDENT", word, start_line, start_col)

    def read_number(self) -> Token:
        start_line, start_col = self.line, self.column
        start = self.pos
        while self.current_char is not None and is_digit(self.current_char):
            self.advance()
        return Token("INT", int(self.text[start:self.pos]), start_line, start_col)

    def read_string(self) -> Optional[Token]:
        start_line, start_col = self.line, self.column
        self.advance()  # opening quote
        chars = []
        while self.current_char is not None and self.current_char != '"':
            if self.current_char == "\n":
                break
            if self.current_char == "\\":
                self.advance()
                esc = self.current_char
                if esc is None:
                    break
                if esc in ESCAPES:
                    chars.append(ESCAPES[esc])
                else:
                    self.error(f"unknown escape sequence '\\{esc}'", self.line, self.column - 1)
                self.advance()
                continue
            chars.append(self.current_char)
            self.advance()

        if self.current_char != '"':
            self.error("unterminated string literal", start_line, start_col)
            return None
        self.advance()  # closing quote
        return Token("STRING", "".join(chars), start_line, start_col)

    def tokenize(self) -> List[Token]:
        """
        Lex the whole input.

        Raises:
            ParseError: listing every lexical error found in the input
        """
        tokens: List[Token] = []

        while self.current_char is not None:
            ch = self.current_char

            if ch.isspace():
                self.advance()
                continue

            if ch == "/" and self.peek() == "/":
                self.skip_comment()
                continue

            if is_ident_start(ch):
                tokens.append(self.read_identifier())
                continue

            if is_digit(ch):
                tokens.append(self.read_number())
                continue

            if ch == '"':
                tok = self.read_string()
                if tok is not None:
                    tokens.append(tok)
                continue

            pair = ch + (self.peek() or "")
            if pair in DOUBLE_CHAR_TOKENS:
                tokens.append(Token(DOUBLE_CHAR_TOKENS[pair], pair, self.line, self.column))
                self.advance()
                self.advance()
                continue

            if ch in SINGLE_CHAR_TOKENS:
                tokens.append(Token(SINGLE_CHAR_TOKENS[ch], ch, self.line, self.column))
                self.advance()
                continue

            self.error(f"unexpected character {ch!r}", self.line, self.column)
            self.advance()

        tokens.append(Token("EOF", None, self.line, self.column))

        if self.issues:
            raise ParseError(self.issues)
        return tokens


def tokenize(source: str) -> List[Token]:
    return Lexer(source).tokenize()
