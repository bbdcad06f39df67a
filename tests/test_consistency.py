"""
The resolver's distances must land on the same frame that a slow search,
outward by name from the current frame, would find.

The programs here avoid declaring a name after a closure already refers to an outer one,
because that is exactly where the two are supposed to disagree.
"""
import io
import unittest
from unittest import mock

from lox.diagnostics import Report
from lox.environment import Environment
from lox.tree_walker.evaluator import Interpreter
from lox.tree_walker.executive import run_source

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

def _naive_frame(env:Environment, name:str):
	while env is not None:
		if name in env.values: return env
		env = env.enclosing

class CheckingInterpreter(Interpreter):
	""" Compares every variable read and write against the slow path before carrying on. """

	def __init__(self, report, out):
		super().__init__(report, out=out)
		self.reads = 0
		self.writes = 0

	def _check_frame(self, name, expr):
		distance = self._locals.get(expr)
		if distance is None: expected = self.globals
		else: expected = self.environment.ancestor(distance)
		found = _naive_frame(self.environment, name.lexeme)
		assert found is expected, (name, distance)

	def _look_up_variable(self, name, expr):
		self._check_frame(name, expr)
		self.reads += 1
		return super()._look_up_variable(name, expr)

	def visit_Assign(self, expr):
		self._check_frame(expr.name, expr)
		self.writes += 1
		return super().visit_Assign(expr)

PROGRAMS = {
	"nested blocks": """
		var a = "g";
		{ var b = "b1"; { var c = "c1"; print a + b + c; { print b + c; } } }
	""",
	"counter": """
		fun makeCounter() {
			var i = 0;
			fun count() { i = i + 1; return i; }
			return count;
		}
		var c = makeCounter();
		c(); c(); print c();
	""",
	"assignments": """
		var total = 0;
		{
			var step = 1;
			for (var i = 0; i < 3; i = i + 1) { step = step * 2; total = total + step; }
			{ var inner = 0; inner = total; step = inner; }
			print step;
		}
	""",
	"recursion": """
		fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); }
		{ fun fact(n) { if (n < 2) return 1; return n * fact(n - 1); } print fact(6) + fib(8); }
	""",
	"loop closures": """
		var saved;
		for (var i = 0; i < 4; i = i + 1) {
			var j = i * 2;
			fun show() { return i + j; }
			if (i == 2) saved = show;
		}
		print saved();
	""",
	"classes": """
		class Shape {
			init(name) { this.name = name; }
			describe() { return this.name + " with area " + this.area_text(); }
			area_text() { return "unknown"; }
		}
		class Square < Shape {
			init(side) { super.init("square"); this.side = side; }
			area_text() { var s = this.side; return "some"; }
			describe() { return "a " + super.describe(); }
		}
		print Square(3).describe();
	""",
	"methods in closures": """
		fun wrap(x) {
			class Box { get() { return x; } set(v) { x = v; } }
			var b = Box();
			b.set(x + 1);
			return b;
		}
		print wrap(1).get();
	""",
}

class ConsistencyTests(unittest.TestCase):

	def test_resolver_agrees_with_slow_lookup(self):
		for label, text in PROGRAMS.items():
			with self.subTest(label):
				report = Silence()
				out = io.StringIO()
				interpreter = CheckingInterpreter(report, out)
				run_source(text, report, interpreter=interpreter)
				report.assert_no_issues(label)
				self.assertFalse(report.had_runtime_error, report.runtime_failure)
				self.assertGreater(interpreter.reads, 0)
				self.assertTrue(out.getvalue())

	def test_writes_are_checked_too(self):
		for label in ["assignments", "counter", "methods in closures"]:
			with self.subTest(label):
				report = Silence()
				interpreter = CheckingInterpreter(report, io.StringIO())
				run_source(PROGRAMS[label], report, interpreter=interpreter)
				report.assert_no_issues(label)
				self.assertFalse(report.had_runtime_error, report.runtime_failure)
				self.assertGreater(interpreter.writes, 0)

	def test_late_shadowing_is_where_they_differ(self):
		text = """
		var a = "global";
		{
			fun showA() { print a; }
			showA();
			var a = "block";
			showA();
		}
		"""
		report = Silence()
		interpreter = CheckingInterpreter(report, io.StringIO())
		with self.assertRaises(AssertionError):
			run_source(text, report, interpreter=interpreter)

if __name__ == '__main__':
	unittest.main()
