import unittest

from lox.environment import Environment
from lox.tokens import Token, TokenKind
from lox.tree_walker.types import LoxRuntimeError

def _name(text):
	return Token(TokenKind.IDENTIFIER, text, None, 1)

class EnvironmentTests(unittest.TestCase):

	def setUp(self) -> None:
		self.outer = Environment()
		self.middle = Environment(self.outer)
		self.inner = Environment(self.middle)

	def test_define_and_get(self):
		self.outer.define("a", 1.0)
		self.assertEqual(1.0, self.outer.get(_name("a")))
		self.assertEqual(1.0, self.inner.get(_name("a")))

	def test_redefine_replaces(self):
		self.outer.define("a", 1.0)
		self.outer.define("a", 2.0)
		self.assertEqual(2.0, self.outer.get(_name("a")))

	def test_nil_is_a_value(self):
		self.outer.define("a", None)
		self.assertIsNone(self.inner.get(_name("a")))

	def test_shadowing(self):
		self.outer.define("a", "outer")
		self.middle.define("a", "middle")
		self.assertEqual("middle", self.inner.get(_name("a")))
		self.assertEqual("outer", self.outer.get(_name("a")))

	def test_assign_finds_nearest(self):
		self.outer.define("a", "outer")
		self.middle.define("a", "middle")
		self.inner.assign(_name("a"), "changed")
		self.assertEqual("changed", self.middle.values["a"])
		self.assertEqual("outer", self.outer.values["a"])
		self.assertNotIn("a", self.inner.values)

	def test_undefined(self):
		with self.assertRaises(LoxRuntimeError) as cm:
			self.inner.get(_name("nope"))
		self.assertEqual("Undefined variable 'nope'.", cm.exception.message)
		with self.assertRaises(LoxRuntimeError):
			self.inner.assign(_name("nope"), 1.0)

	def test_ancestor(self):
		self.assertIs(self.inner, self.inner.ancestor(0))
		self.assertIs(self.middle, self.inner.ancestor(1))
		self.assertIs(self.outer, self.inner.ancestor(2))

	def test_get_at_ignores_shadowing(self):
		self.outer.define("a", "outer")
		self.middle.define("a", "middle")
		self.assertEqual("outer", self.inner.get_at(2, "a"))
		self.assertEqual("middle", self.inner.get_at(1, "a"))

	def test_assign_at(self):
		self.outer.define("a", "outer")
		self.middle.define("a", "middle")
		self.inner.assign_at(2, _name("a"), "changed")
		self.assertEqual("changed", self.outer.values["a"])
		self.assertEqual("middle", self.middle.values["a"])

	def test_distance_past_the_top_is_a_defect(self):
		with self.assertRaises(AssertionError):
			self.inner.ancestor(3)

if __name__ == '__main__':
	unittest.main()
