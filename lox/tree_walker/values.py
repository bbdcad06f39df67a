"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Numbers, strings, booleans, and nil play themselves, but callables and objects need more help.
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence
from .. import syntax
from ..environment import Environment
from ..tokens import Token
from .types import LoxRuntimeError, VALUE, COMPLETION

INITIALIZER = "init"

class Procedure(ABC):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def call(self, interpreter, arguments:Sequence[VALUE]) -> VALUE: pass

class Closure(Procedure):
	"""
	The run-time manifestation of a function declaration: a callable value tied to its natal environment.
	A bound method is also one of these, whose natal environment is one frame binding `this`.
	"""
	def __init__(self, declaration:syntax.Function, closure:Environment, is_initializer:bool=False):
		self._declaration = declaration
		self._closure = closure
		self._is_initializer = is_initializer

	@property
	def name(self) -> str: return self._declaration.name.lexeme

	def __str__(self): return "<fn %s>" % self.name

	def arity(self) -> int: return len(self._declaration.params)

	def bind(self, instance:"LoxInstance") -> "Closure":
		env = Environment(self._closure)
		env.define("this", instance)
		return Closure(self._declaration, env, self._is_initializer)

	def call(self, interpreter, arguments:Sequence[VALUE]) -> VALUE:
		env = Environment(self._closure)
		for param, arg in zip(self._declaration.params, arguments):
			env.define(param.lexeme, arg)
		completion: COMPLETION = interpreter.execute_block(self._declaration.body, env)
		# An initializer hands back its instance, however it finishes.
		if self._is_initializer: return self._closure.get_at(0, "this")
		if completion is not None: return completion.value
		return None

class NativeFunction(Procedure):
	""" A callable supplied by the host. The evaluator knows only its name and arity. """
	def __init__(self, name:str, arity:int, fn:Callable[..., VALUE]):
		self.name = name
		self._arity = arity
		self._fn = fn

	def __str__(self): return "<native fn>"

	def arity(self) -> int: return self._arity

	def call(self, interpreter, arguments:Sequence[VALUE]) -> VALUE:
		return self._fn(*arguments)

class LoxClass(Procedure):
	def __init__(self, name:str, superclass:Optional["LoxClass"], methods:dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self): return self.name

	def find_method(self, name:str) -> Optional[Closure]:
		klass = self
		while klass is not None:
			if name in klass._methods:
				return klass._methods[name]
			klass = klass.superclass
		return None

	def arity(self) -> int:
		initializer = self.find_method(INITIALIZER)
		return 0 if initializer is None else initializer.arity()

	def call(self, interpreter, arguments:Sequence[VALUE]) -> VALUE:
		instance = LoxInstance(self)
		initializer = self.find_method(INITIALIZER)
		if initializer is not None:
			initializer.bind(instance).call(interpreter, arguments)
		return instance

class LoxInstance:
	def __init__(self, klass:LoxClass):
		self.klass = klass
		self.fields: dict[str, VALUE] = {}

	def __str__(self): return "%s instance" % self.klass.name

	def get(self, name:Token) -> VALUE:
		# Fields shadow methods.
		if name.lexeme in self.fields:
			return self.fields[name.lexeme]
		method = self.klass.find_method(name.lexeme)
		if method is not None:
			return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)

	def set(self, name:Token, value:VALUE):
		self.fields[name.lexeme] = value
