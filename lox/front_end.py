"""
Recursive-descent parser over the token list.

On malformed input it reports the problem, skips ahead to something that
looks like the start of the next statement, and keeps going, so one pass
can turn up several mistakes. Statements that failed to parse come out as None.
"""
from typing import Optional
from boozetools.parsing.interface import ParseError

from . import syntax
from .diagnostics import Report
from .scanner import scan
from .tokens import Token, TokenKind as K

MAX_ARGS = 255

class LoxParseError(ParseError):
	""" Internal signal to unwind to the nearest statement boundary. """
	pass

_STATEMENT_STARTERS = frozenset([K.CLASS, K.FUN, K.VAR, K.FOR, K.IF, K.WHILE, K.PRINT, K.RETURN])

class Parser:
	def __init__(self, tokens:list[Token], report:Report):
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[Optional[syntax.Stmt]]:
		statements = []
		while not self._at_end():
			statements.append(self._declaration())
		return statements

	# Statements

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match(K.CLASS): return self._class_declaration()
			if self._match(K.FUN): return self._function("function")
			if self._match(K.VAR): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.Class:
		name = self._consume(K.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(K.LESS):
			self._consume(K.IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Variable(self._previous())
		self._consume(K.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(K.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(K.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.Class(name, superclass, methods)

	def _function(self, kind:str) -> syntax.Function:
		name = self._consume(K.IDENTIFIER, "Expect %s name." % kind)
		self._consume(K.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(K.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d parameters." % MAX_ARGS)
				params.append(self._consume(K.IDENTIFIER, "Expect parameter name."))
				if not self._match(K.COMMA): break
		self._consume(K.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(K.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.Function(name, params, self._block())

	def _var_declaration(self) -> syntax.Var:
		name = self._consume(K.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(K.EQUAL) else None
		self._consume(K.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.Var(name, initializer)

	def _statement(self) -> syntax.Stmt:
		if self._match(K.FOR): return self._for_statement()
		if self._match(K.IF): return self._if_statement()
		if self._match(K.PRINT): return self._print_statement()
		if self._match(K.RETURN): return self._return_statement()
		if self._match(K.WHILE): return self._while_statement()
		if self._match(K.LEFT_BRACE): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self) -> syntax.Stmt:
		""" There is no For node: the loop becomes a While inside a Block. """
		self._consume(K.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(K.SEMICOLON): initializer = None
		elif self._match(K.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()
		condition = None if self._check(K.SEMICOLON) else self._expression()
		self._consume(K.SEMICOLON, "Expect ';' after loop condition.")
		increment = None if self._check(K.RIGHT_PAREN) else self._expression()
		self._consume(K.RIGHT_PAREN, "Expect ')' after for clauses.")
		body = self._statement()
		if increment is not None:
			body = syntax.Block([body, syntax.Expression(increment)])
		if condition is None:
			condition = syntax.Literal(True)
		body = syntax.While(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self) -> syntax.If:
		self._consume(K.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(K.RIGHT_PAREN, "Expect ')' after if condition.")
		then_branch = self._statement()
		else_branch = self._statement() if self._match(K.ELSE) else None
		return syntax.If(condition, then_branch, else_branch)

	def _print_statement(self) -> syntax.Print:
		value = self._expression()
		self._consume(K.SEMICOLON, "Expect ';' after value.")
		return syntax.Print(value)

	def _return_statement(self) -> syntax.Return:
		keyword = self._previous()
		value = None if self._check(K.SEMICOLON) else self._expression()
		self._consume(K.SEMICOLON, "Expect ';' after return value.")
		return syntax.Return(keyword, value)

	def _while_statement(self) -> syntax.While:
		self._consume(K.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(K.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.While(condition, self._statement())

	def _block(self) -> list[Optional[syntax.Stmt]]:
		statements = []
		while not self._check(K.RIGHT_BRACE) and not self._at_end():
			statements.append(self._declaration())
		self._consume(K.RIGHT_BRACE, "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.Expression:
		expr = self._expression()
		self._consume(K.SEMICOLON, "Expect ';' after expression.")
		return syntax.Expression(expr)

	# Expressions, loosest-binding first

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(K.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Variable):
				return syntax.Assign(expr.name, value)
			if isinstance(expr, syntax.Get):
				return syntax.Set(expr.obj, expr.name, value)
			# Report, but there's no need to resynchronize.
			self._error(equals, "Invalid assignment target.")
		return expr

	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match(K.OR):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._and())
		return expr

	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match(K.AND):
			op = self._previous()
			expr = syntax.Logical(expr, op, self._equality())
		return expr

	def _left_associative(self, operand, *kinds) -> syntax.Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = syntax.Binary(expr, op, operand())
		return expr

	def _equality(self): return self._left_associative(self._comparison, K.BANG_EQUAL, K.EQUAL_EQUAL)
	def _comparison(self): return self._left_associative(self._term, K.GREATER, K.GREATER_EQUAL, K.LESS, K.LESS_EQUAL)
	def _term(self): return self._left_associative(self._factor, K.MINUS, K.PLUS)
	def _factor(self): return self._left_associative(self._unary, K.SLASH, K.STAR)

	def _unary(self) -> syntax.Expr:
		if self._match(K.BANG, K.MINUS):
			op = self._previous()
			return syntax.Unary(op, self._unary())
		return self._call()

	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(K.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(K.DOT):
				name = self._consume(K.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.Get(expr, name)
			else:
				return expr

	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		arguments = []
		if not self._check(K.RIGHT_PAREN):
			while True:
				if len(arguments) >= MAX_ARGS:
					self._error(self._peek(), "Can't have more than %d arguments." % MAX_ARGS)
				arguments.append(self._expression())
				if not self._match(K.COMMA): break
		paren = self._consume(K.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, arguments)

	def _primary(self) -> syntax.Expr:
		if self._match(K.FALSE): return syntax.Literal(False)
		if self._match(K.TRUE): return syntax.Literal(True)
		if self._match(K.NIL): return syntax.Literal(None)
		if self._match(K.NUMBER, K.STRING): return syntax.Literal(self._previous().literal)
		if self._match(K.SUPER):
			keyword = self._previous()
			self._consume(K.DOT, "Expect '.' after 'super'.")
			method = self._consume(K.IDENTIFIER, "Expect superclass method name.")
			return syntax.Super(keyword, method)
		if self._match(K.THIS): return syntax.This(self._previous())
		if self._match(K.IDENTIFIER): return syntax.Variable(self._previous())
		if self._match(K.LEFT_PAREN):
			expr = self._expression()
			self._consume(K.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")

	# Machinery

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind is K.SEMICOLON: return
			if self._peek().kind in _STATEMENT_STARTERS: return
			self._advance()

	def _consume(self, kind:K, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.error(token, message)
		return LoxParseError(token, message)

	def _match(self, *kinds:K) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _check(self, kind:K) -> bool:
		return not self._at_end() and self._peek().kind is kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self) -> bool: return self._peek().kind is K.EOF
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

def parse_text(text:str, report:Report, filename:Optional[str]=None) -> list[Optional[syntax.Stmt]]:
	""" Submit text to scanner and parser together. """
	report.set_source(text, filename)
	return Parser(scan(text, report), report).parse()
