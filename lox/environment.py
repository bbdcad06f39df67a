"""
Run-time scopes: the canonical list-structured search.

Each Environment is one frame of bindings plus a link to the frame that encloses it.
A closure holds on to its frame, and so keeps the whole enclosing chain alive.
"""
from typing import Optional
from .tokens import Token
from .tree_walker.types import LoxRuntimeError, VALUE

class Environment:
	def __init__(self, enclosing:Optional["Environment"]=None):
		self.enclosing = enclosing
		self.values: dict[str, VALUE] = {}

	def define(self, name:str, value:VALUE):
		""" Introduce a binding in this frame, quietly replacing any prior one. """
		self.values[name] = value

	def get(self, name:Token) -> VALUE:
		env = self
		while env is not None:
			if name.lexeme in env.values:
				return env.values[name.lexeme]
			env = env.enclosing
		raise _undefined(name)

	def assign(self, name:Token, value:VALUE):
		env = self
		while env is not None:
			if name.lexeme in env.values:
				env.values[name.lexeme] = value
				return
			env = env.enclosing
		raise _undefined(name)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance):
			env = env.enclosing
			assert env is not None, "Resolved distance %d runs off the end of the chain."%distance
		return env

	# The resolver has already proven these bindings exist,
	# so a miss here is a bug in the resolver, not in the user's program.

	def get_at(self, distance:int, name:str) -> VALUE:
		return self.ancestor(distance).values[name]

	def assign_at(self, distance:int, name:Token, value:VALUE):
		frame = self.ancestor(distance)
		assert name.lexeme in frame.values, name
		frame.values[name.lexeme] = value

	def __repr__(self):
		depth = 0
		env = self.enclosing
		while env is not None:
			depth, env = depth + 1, env.enclosing
		return "<Environment depth=%d %s>" % (depth, sorted(self.values))

def _undefined(name:Token):
	return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
