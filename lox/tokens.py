"""
Tokens are the currency between the scanner and everything downstream.
The parser keeps them in the tree so that later passes can say where things went wrong.
"""
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, NamedTuple

class TokenKind(Enum):
	# Single-character tokens.
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()

	# One or two character tokens.
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()

	# Literals.
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()

	# Keywords.
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FUN = auto()
	FOR = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()

	EOF = auto()

KEYWORDS = MappingProxyType({
	kind.name.lower(): kind
	for kind in (
		TokenKind.AND, TokenKind.CLASS, TokenKind.ELSE, TokenKind.FALSE,
		TokenKind.FUN, TokenKind.FOR, TokenKind.IF, TokenKind.NIL,
		TokenKind.OR, TokenKind.PRINT, TokenKind.RETURN, TokenKind.SUPER,
		TokenKind.THIS, TokenKind.TRUE, TokenKind.VAR, TokenKind.WHILE,
	)
})

class Token(NamedTuple):
	kind: TokenKind
	lexeme: str
	literal: Any
	line: int  # 1-based
	offset: int = 0  # Where the lexeme starts in the source text; diagnostics use it.

	def __str__(self): return "%s %s %s" % (self.kind.name, self.lexeme, self.literal)
