"""
The tree-walking evaluator.

There is one visit-method per kind of node. Expressions produce values.
Statements produce a completion: None to carry on with the next statement,
or a Returning record which every enclosing statement passes straight back up
until the function call it belongs to takes the value out of it.
"""
import sys, math, operator
from typing import Iterable, Optional, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax
from ..diagnostics import Report
from ..environment import Environment
from ..primitive import NATIVES
from ..resolution import SIDE_TABLE
from ..tokens import Token, TokenKind as K
from .types import LoxRuntimeError, Returning, VALUE, COMPLETION
from .values import Procedure, Closure, NativeFunction, LoxClass, LoxInstance, INITIALIZER

def _is_number(x) -> bool:
	return isinstance(x, (int, float)) and not isinstance(x, bool)

def _divide(a, b):
	# IEEE-754 rather than an exception.
	try: return a / b
	except ZeroDivisionError:
		if a == 0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)

NUMERIC_BINARY = {
	K.MINUS: operator.sub,
	K.STAR: operator.mul,
	K.SLASH: _divide,
	K.GREATER: operator.gt,
	K.GREATER_EQUAL: operator.ge,
	K.LESS: operator.lt,
	K.LESS_EQUAL: operator.le,
}

def is_truthy(value:VALUE) -> bool:
	""" Only nil and false are falsy. Zero and the empty string are truthy. """
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	if a is None: return b is None
	if _is_number(a) and _is_number(b): return a == b
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if _is_number(value):
		if math.isnan(value): return "NaN"
		if math.isinf(value): return "Infinity" if value > 0 else "-Infinity"
		if value != 0 and float(value).is_integer(): return "%d" % value
		text = repr(float(value))
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _check_number_operand(op:Token, operand:VALUE):
	if not _is_number(operand):
		raise LoxRuntimeError(op, "Operand must be a number.")

def _check_number_operands(op:Token, left:VALUE, right:VALUE):
	if not (_is_number(left) and _is_number(right)):
		raise LoxRuntimeError(op, "Operands must be numbers.")

class Interpreter(Visitor):
	globals: Environment
	_environment: Environment
	_locals: SIDE_TABLE

	def __init__(self, report:Report, *, out:Optional[TextIO]=None, natives:Iterable[NativeFunction]=NATIVES):
		self.report = report
		self._out = out
		self.globals = Environment()
		for native in natives:
			self.globals.define(native.name, native)
		self._environment = self.globals
		self._locals = {}

	@property
	def environment(self) -> Environment:
		""" Whichever frame is current at the moment """
		return self._environment

	def resolve(self, side_table:SIDE_TABLE):
		""" Accept the resolver's verdicts. A REPL keeps adding to them line by line. """
		# Nothing is ever dropped: a closure from an earlier line may still run and need its entries.
		self._locals.update(side_table)

	def interpret(self, statements:Iterable[Optional[syntax.Stmt]]) -> bool:
		"""
		Run top-level statements in order. The first run-time error stops the
		run and goes to the report. Answers whether everything ran to completion.
		"""
		try:
			for stmt in statements:
				if stmt is not None:
					completion = self.execute(stmt)
					assert completion is None, "The resolver forbids top-level return."
		except LoxRuntimeError as err:
			self.report.runtime_error(err)
			return False
		return True

	def execute(self, stmt:syntax.Stmt) -> COMPLETION:
		return self.visit(stmt)

	def evaluate(self, expr:syntax.Expr) -> VALUE:
		return self.visit(expr)

	def execute_block(self, statements:Iterable[Optional[syntax.Stmt]], environment:Environment) -> COMPLETION:
		previous = self._environment
		try:
			self._environment = environment
			for stmt in statements:
				if stmt is None: continue
				completion = self.execute(stmt)
				if completion is not None: return completion
			return None
		finally:
			self._environment = previous

	def _look_up_variable(self, name:Token, expr:syntax.Expr) -> VALUE:
		distance = self._locals.get(expr)
		if distance is None:
			return self.globals.get(name)
		return self._environment.get_at(distance, name.lexeme)

	# Statements

	def visit_Expression(self, stmt:syntax.Expression) -> COMPLETION:
		self.evaluate(stmt.expression)
		return None

	def visit_Print(self, stmt:syntax.Print) -> COMPLETION:
		value = self.evaluate(stmt.expression)
		print(stringify(value), file=self._out or sys.stdout)
		return None

	def visit_Var(self, stmt:syntax.Var) -> COMPLETION:
		value = None if stmt.initializer is None else self.evaluate(stmt.initializer)
		self._environment.define(stmt.name.lexeme, value)
		return None

	def visit_Block(self, stmt:syntax.Block) -> COMPLETION:
		return self.execute_block(stmt.statements, Environment(self._environment))

	def visit_If(self, stmt:syntax.If) -> COMPLETION:
		if is_truthy(self.evaluate(stmt.condition)):
			return self.execute(stmt.then_branch)
		elif stmt.else_branch is not None:
			return self.execute(stmt.else_branch)
		return None

	def visit_While(self, stmt:syntax.While) -> COMPLETION:
		while is_truthy(self.evaluate(stmt.condition)):
			completion = self.execute(stmt.body)
			if completion is not None: return completion
		return None

	def visit_Function(self, stmt:syntax.Function) -> COMPLETION:
		self._environment.define(stmt.name.lexeme, Closure(stmt, self._environment))
		return None

	def visit_Return(self, stmt:syntax.Return) -> COMPLETION:
		value = None if stmt.value is None else self.evaluate(stmt.value)
		return Returning(value)

	def visit_Class(self, stmt:syntax.Class) -> COMPLETION:
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")

		# A placeholder binding first; the finished class replaces it below.
		self._environment.define(stmt.name.lexeme, None)

		natal = self._environment
		if superclass is not None:
			natal = Environment(natal)
			natal.define("super", superclass)

		methods = {
			method.name.lexeme: Closure(method, natal, method.name.lexeme == INITIALIZER)
			for method in stmt.methods
		}
		klass = LoxClass(stmt.name.lexeme, superclass, methods)
		self._environment.assign(stmt.name, klass)
		return None

	# Expressions

	def visit_Literal(self, expr:syntax.Literal) -> VALUE:
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping) -> VALUE:
		return self.evaluate(expr.expression)

	def visit_Unary(self, expr:syntax.Unary) -> VALUE:
		right = self.evaluate(expr.right)
		if expr.op.kind is K.BANG:
			return not is_truthy(right)
		assert expr.op.kind is K.MINUS, expr.op
		_check_number_operand(expr.op, right)
		return -right

	def visit_Binary(self, expr:syntax.Binary) -> VALUE:
		left = self.evaluate(expr.left)
		right = self.evaluate(expr.right)
		kind = expr.op.kind
		if kind is K.PLUS:
			if _is_number(left) and _is_number(right): return left + right
			if isinstance(left, str) and isinstance(right, str): return left + right
			raise LoxRuntimeError(expr.op, "Operands must be two numbers or two strings.")
		if kind is K.EQUAL_EQUAL: return is_equal(left, right)
		if kind is K.BANG_EQUAL: return not is_equal(left, right)
		_check_number_operands(expr.op, left, right)
		return NUMERIC_BINARY[kind](left, right)

	def visit_Logical(self, expr:syntax.Logical) -> VALUE:
		# Yields whichever operand settled the question, not a normalized boolean.
		left = self.evaluate(expr.left)
		if expr.op.kind is K.OR:
			if is_truthy(left): return left
		else:
			if not is_truthy(left): return left
		return self.evaluate(expr.right)

	def visit_Variable(self, expr:syntax.Variable) -> VALUE:
		return self._look_up_variable(expr.name, expr)

	def visit_Assign(self, expr:syntax.Assign) -> VALUE:
		value = self.evaluate(expr.value)
		distance = self._locals.get(expr)
		if distance is None:
			self.globals.assign(expr.name, value)
		else:
			self._environment.assign_at(distance, expr.name, value)
		return value

	def visit_Call(self, expr:syntax.Call) -> VALUE:
		callee = self.evaluate(expr.callee)
		arguments = [self.evaluate(a) for a in expr.arguments]
		if not isinstance(callee, Procedure):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		if len(arguments) != callee.arity():
			pattern = "Expected %d arguments but got %d."
			raise LoxRuntimeError(expr.paren, pattern % (callee.arity(), len(arguments)))
		try: return callee.call(self, arguments)
		except RecursionError:
			raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

	def visit_Get(self, expr:syntax.Get) -> VALUE:
		obj = self.evaluate(expr.obj)
		if isinstance(obj, LoxInstance):
			return obj.get(expr.name)
		raise LoxRuntimeError(expr.name, "Only instances have properties.")

	def visit_Set(self, expr:syntax.Set) -> VALUE:
		obj = self.evaluate(expr.obj)
		if not isinstance(obj, LoxInstance):
			raise LoxRuntimeError(expr.name, "Only instances have fields.")
		value = self.evaluate(expr.value)
		obj.set(expr.name, value)
		return value

	def visit_This(self, expr:syntax.This) -> VALUE:
		return self._look_up_variable(expr.keyword, expr)

	def visit_Super(self, expr:syntax.Super) -> VALUE:
		distance = self._locals[expr]
		superclass = self._environment.get_at(distance, "super")
		# The frame binding `this` always sits just inside the one binding `super`.
		instance = self._environment.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method, "Undefined property '%s'." % expr.method.lexeme)
		return method.bind(instance)
