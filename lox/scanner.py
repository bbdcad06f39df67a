"""
Raw source text in, a list of tokens out.

The lexicon is a set of regular patterns, each hooked up to a small action.
Problems go to the report; scanning carries on regardless.
"""
import bisect
from boozetools.scanning import miniscan
from boozetools.scanning.engine import IterableScanner

from .diagnostics import Report
from .tokens import Token, TokenKind, KEYWORDS

LEXICON = miniscan.Definition("Lox")

PUNCTUATION = {
	'(': TokenKind.LEFT_PAREN,
	')': TokenKind.RIGHT_PAREN,
	'{': TokenKind.LEFT_BRACE,
	'}': TokenKind.RIGHT_BRACE,
	',': TokenKind.COMMA,
	'.': TokenKind.DOT,
	'-': TokenKind.MINUS,
	'+': TokenKind.PLUS,
	';': TokenKind.SEMICOLON,
	'*': TokenKind.STAR,
	'/': TokenKind.SLASH,
	'!': TokenKind.BANG,
	'!=': TokenKind.BANG_EQUAL,
	'=': TokenKind.EQUAL,
	'==': TokenKind.EQUAL_EQUAL,
	'<': TokenKind.LESS,
	'<=': TokenKind.LESS_EQUAL,
	'>': TokenKind.GREATER,
	'>=': TokenKind.GREATER_EQUAL,
}

class Scanner(IterableScanner):
	"""
	The automaton does the matching. This adds what the rest of the interpreter
	wants to know about each match: its line, and where to send complaints.
	"""
	def __init__(self, source:str, report:Report):
		super().__init__(source, LEXICON.get_dfa(), LEXICON, start=None)
		self.report = report
		self._size = len(source)
		self._newlines = [i for i, c in enumerate(source) if c == '\n']

	def line_at(self, offset:int) -> int:
		return bisect.bisect_left(self._newlines, offset) + 1

	def emit(self, kind:TokenKind, literal=None):
		# A string spanning lines belongs to the line where it ends.
		line = self.line_at(self.right - 1)
		self.token(kind, Token(kind, self.match(), literal, line, self.left))

	def scan_tokens(self) -> list[Token]:
		tokens = [token for kind, token in self]
		tokens.append(Token(TokenKind.EOF, "", None, self.line_at(self._size), self._size))
		return tokens

LEXICON.ignore(r'\s+')
LEXICON.ignore(r'\/\/.*')

@LEXICON.on(r'[\(\)\{\}\,\.\-\+\;\*\/]|[\!\=\<\>]\=?')
def scan_punctuation(yy:Scanner): yy.emit(PUNCTUATION[yy.match()])

# A fractional part needs at least one digit after the dot.
@LEXICON.on(r'\d+(\.\d+)?')
def scan_number(yy:Scanner): yy.emit(TokenKind.NUMBER, float(yy.match()))

@LEXICON.on(r'"[^"]*"')
def scan_string(yy:Scanner): yy.emit(TokenKind.STRING, yy.match()[1:-1])

@LEXICON.on(r'[\l_]\w*')
def scan_word(yy:Scanner): yy.emit(KEYWORDS.get(yy.match(), TokenKind.IDENTIFIER))

@LEXICON.on(r'"[^"]*')
def scan_unterminated_string(yy:Scanner):
	yy.report.error_at_line(yy.line_at(yy.right), yy.left, "Unterminated string.")

# Declared last, so that it only wins when nothing else matches.
@LEXICON.on(r'{ANY}')
def scan_stray(yy:Scanner):
	yy.report.error_at_line(yy.line_at(yy.left), yy.left, "Unexpected character.")

def scan(source:str, report:Report) -> list[Token]:
	return Scanner(source, report).scan_tokens()
