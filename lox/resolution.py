"""
All the scope-resolution stuff goes here.

One top-down walk over the tree simulates the run-time scopes without running anything.
By the time it finishes, every reference to a local variable has a recorded distance:
how many enclosing frames out from the current one hold its binding.
References it cannot find locally get no entry, and the evaluator looks for them among the globals.
"""
from enum import Enum, auto
from typing import Iterable, Optional
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .tokens import Token

SIDE_TABLE = dict[syntax.Expr, int]

class FunctionType(Enum):
	NONE = auto()
	FUNCTION = auto()
	INITIALIZER = auto()
	METHOD = auto()

class ClassType(Enum):
	NONE = auto()
	CLASS = auto()
	SUBCLASS = auto()

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def tour(self, items:Iterable[Optional[syntax.Stmt]]):
		for item in items:
			# Statements that failed to parse come through as None.
			if item is not None: self.visit(item)

	def visit_Literal(self, expr:syntax.Literal): pass

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.expression)

	def visit_Unary(self, expr:syntax.Unary):
		self.visit(expr.right)

	def visit_Binary(self, expr:syntax.Binary):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Logical(self, expr:syntax.Logical):
		self.visit(expr.left)
		self.visit(expr.right)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.callee)
		for a in expr.arguments:
			self.visit(a)

	def visit_Get(self, expr:syntax.Get):
		# Properties are looked up dynamically, so only the object gets resolved.
		self.visit(expr.obj)

	def visit_Set(self, expr:syntax.Set):
		self.visit(expr.value)
		self.visit(expr.obj)

	def visit_Expression(self, stmt:syntax.Expression):
		self.visit(stmt.expression)

	def visit_Print(self, stmt:syntax.Print):
		self.visit(stmt.expression)

	def visit_If(self, stmt:syntax.If):
		self.visit(stmt.condition)
		self.visit(stmt.then_branch)
		if stmt.else_branch is not None:
			self.visit(stmt.else_branch)

	def visit_While(self, stmt:syntax.While):
		self.visit(stmt.condition)
		self.visit(stmt.body)

class Resolver(TopDown):
	"""
	Maintains a stack of scopes, innermost last. Each maps a name to whether
	its declaration is finished: the flag is False while the variable's own
	initializer is being resolved, which is how `var a = a;` gets caught.

	The global scope is not on the stack. Globals may be declared twice,
	and may be referred to before they are declared, as long as they exist by run time.

	Static errors go to the report. The walk carries on regardless,
	so that one pass can surface several of them.
	"""
	report: Report
	_scopes: list[dict[str, bool]]
	_locals: SIDE_TABLE
	_current_function: FunctionType
	_current_class: ClassType

	def __init__(self, report:Report):
		self.report = report
		self._scopes = []
		self._locals = {}
		self._current_function = FunctionType.NONE
		self._current_class = ClassType.NONE

	def resolve(self, statements:Iterable[Optional[syntax.Stmt]]) -> SIDE_TABLE:
		self._locals = {}
		self.tour(statements)
		assert not self._scopes
		return self._locals

	# Scope bookkeeping

	def _begin_scope(self): self._scopes.append({})
	def _end_scope(self): self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self.report.error(name, "Already a variable with this name in this scope.")
		scope[name.lexeme] = False

	def _define(self, name:Token):
		if not self._scopes: return
		self._scopes[-1][name.lexeme] = True

	def _resolve_local(self, expr:syntax.Expr, name:Token):
		for distance, scope in enumerate(reversed(self._scopes)):
			if name.lexeme in scope:
				self._locals[expr] = distance
				return

	def _resolve_function(self, function:syntax.Function, kind:FunctionType):
		enclosing_function = self._current_function
		self._current_function = kind
		self._begin_scope()
		for param in function.params:
			self._declare(param)
			self._define(param)
		self.tour(function.body)
		self._end_scope()
		self._current_function = enclosing_function

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.tour(stmt.statements)
		self._end_scope()

	def visit_Var(self, stmt:syntax.Var):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_Function(self, stmt:syntax.Function):
		# Defined before the body, so the function can refer to itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionType.FUNCTION)

	def visit_Return(self, stmt:syntax.Return):
		if self._current_function is FunctionType.NONE:
			self.report.error(stmt.keyword, "Can't return from top-level code.")
		if stmt.value is not None:
			if self._current_function is FunctionType.INITIALIZER:
				self.report.error(stmt.keyword, "Can't return a value from an initializer.")
			self.visit(stmt.value)

	def visit_Class(self, stmt:syntax.Class):
		enclosing_class = self._current_class
		self._current_class = ClassType.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self.report.error(stmt.superclass.name, "A class can't inherit from itself.")
			self._current_class = ClassType.SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope()
			self._scopes[-1]["super"] = True

		self._begin_scope()
		self._scopes[-1]["this"] = True
		for method in stmt.methods:
			kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None: self._end_scope()
		self._current_class = enclosing_class

	# Expressions

	def visit_Variable(self, expr:syntax.Variable):
		if self._scopes and self._scopes[-1].get(expr.name.lexeme) is False:
			self.report.error(expr.name, "Can't read local variable in its own initializer.")
		self._resolve_local(expr, expr.name)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name)

	def visit_This(self, expr:syntax.This):
		if self._current_class is ClassType.NONE:
			self.report.error(expr.keyword, "Can't use 'this' outside of a class.")
			return
		self._resolve_local(expr, expr.keyword)

	def visit_Super(self, expr:syntax.Super):
		if self._current_class is ClassType.NONE:
			self.report.error(expr.keyword, "Can't use 'super' outside of a class.")
		elif self._current_class is not ClassType.SUBCLASS:
			self.report.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
		self._resolve_local(expr, expr.keyword)

def resolve(statements:Iterable[Optional[syntax.Stmt]], report:Report) -> SIDE_TABLE:
	""" Convenience: one fresh resolver, one pass. """
	return Resolver(report).resolve(statements)
