"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""
from typing import Any, NamedTuple, Optional, Union
from ..tokens import Token

# Numbers are floats, strings are str, booleans are bool, and nil is None.
# Everything else is one of the classes in .values
VALUE = Any

class LoxRuntimeError(Exception):
	""" A user-visible failure while running; it knows which token to blame. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message

class Returning(NamedTuple):
	""" The completion of a `return` statement, on its way out to the call that consumes it. """
	value: VALUE

# Statement execution yields None for ordinary completion.
COMPLETION = Optional[Returning]
