"""
The set of parse-nodes in simple form.
The parser calls these constructors as it recognizes each phrase.

Expression nodes hash and compare by identity, which is exactly what the
resolver wants: it keys its side-table on the particular occurrence of an
expression, not on what the expression looks like.
"""
from typing import Any, Optional, Sequence
from .tokens import Token

class Expr:
	pass

class Stmt:
	pass

class Literal(Expr):
	def __init__(self, value: Any): self.value = value
	def __repr__(self): return "<Literal %r>" % self.value

class Grouping(Expr):
	def __init__(self, expression: Expr): self.expression = expression

class Unary(Expr):
	def __init__(self, op: Token, right: Expr):
		self.op, self.right = op, right

class Binary(Expr):
	def __init__(self, left: Expr, op: Token, right: Expr):
		self.left, self.op, self.right = left, op, right

class Logical(Expr):
	""" Short-circuit `and` / `or`; kept apart from Binary because it evaluates lazily. """
	def __init__(self, left: Expr, op: Token, right: Expr):
		self.left, self.op, self.right = left, op, right

class Variable(Expr):
	def __init__(self, name: Token): self.name = name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme

class Assign(Expr):
	def __init__(self, name: Token, value: Expr):
		self.name, self.value = name, value
	def __repr__(self): return "<assign:%s>" % self.name.lexeme

class Call(Expr):
	def __init__(self, callee: Expr, paren: Token, arguments: Sequence[Expr]):
		# The closing parenthesis is what a run-time error points at.
		self.callee, self.paren, self.arguments = callee, paren, arguments

class Get(Expr):
	def __init__(self, obj: Expr, name: Token):
		self.obj, self.name = obj, name

class Set(Expr):
	def __init__(self, obj: Expr, name: Token, value: Expr):
		self.obj, self.name, self.value = obj, name, value

class This(Expr):
	def __init__(self, keyword: Token): self.keyword = keyword
	def __repr__(self): return "<this>"

class Super(Expr):
	def __init__(self, keyword: Token, method: Token):
		self.keyword, self.method = keyword, method
	def __repr__(self): return "<super.%s>" % self.method.lexeme

###############################################################################

class Expression(Stmt):
	def __init__(self, expression: Expr): self.expression = expression

class Print(Stmt):
	def __init__(self, expression: Expr): self.expression = expression

class Var(Stmt):
	def __init__(self, name: Token, initializer: Optional[Expr]):
		self.name, self.initializer = name, initializer
	def __repr__(self): return "{var %s}" % self.name.lexeme

class Block(Stmt):
	def __init__(self, statements: Sequence[Optional[Stmt]]): self.statements = statements

class If(Stmt):
	def __init__(self, condition: Expr, then_branch: Stmt, else_branch: Optional[Stmt]):
		self.condition, self.then_branch, self.else_branch = condition, then_branch, else_branch

class While(Stmt):
	def __init__(self, condition: Expr, body: Stmt):
		self.condition, self.body = condition, body

class Function(Stmt):
	def __init__(self, name: Token, params: Sequence[Token], body: Sequence[Optional[Stmt]]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self):
		return "{fun %s(%s)}" % (self.name.lexeme, ", ".join(p.lexeme for p in self.params))

class Return(Stmt):
	def __init__(self, keyword: Token, value: Optional[Expr]):
		self.keyword, self.value = keyword, value

class Class(Stmt):
	def __init__(self, name: Token, superclass: Optional[Variable], methods: Sequence[Function]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def __repr__(self): return "{class %s}" % self.name.lexeme
