import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lox import cmdline
from lox.diagnostics import Report

class DriverTests(unittest.TestCase):

	def setUp(self) -> None:
		self.folder = tempfile.TemporaryDirectory()
		self.addCleanup(self.folder.cleanup)
		self.stdout = io.StringIO()
		self.stderr = io.StringIO()
		for target, value in [("sys.stdout", self.stdout), ("sys.stderr", self.stderr)]:
			patcher = mock.patch(target, value)
			patcher.start()
			self.addCleanup(patcher.stop)

	def script(self, text:str) -> str:
		path = Path(self.folder.name) / "program.lox"
		path.write_text(text, encoding="utf-8")
		return str(path)

	def exit_code(self, *argv) -> int:
		with self.assertRaises(SystemExit) as cm:
			cmdline.main(list(argv))
		return cm.exception.code

	def test_good_program(self):
		self.assertEqual(0, self.exit_code(self.script('print "hello, world";')))
		self.assertEqual("hello, world\n", self.stdout.getvalue())

	@mock.patch.object(Report, "complain_to_console")
	def test_static_error(self, complain):
		self.assertEqual(65, self.exit_code(self.script("print 1; print ;")))
		self.assertEqual("", self.stdout.getvalue())
		complain.assert_called_once()

	@mock.patch.object(Report, "complain_to_console")
	def test_resolver_error(self, complain):
		self.assertEqual(65, self.exit_code(self.script("return 1;")))
		complain.assert_called_once()

	def test_runtime_error(self):
		self.assertEqual(70, self.exit_code(self.script('print "ok";\nprint nope;')))
		self.assertEqual("ok\n", self.stdout.getvalue())
		self.assertIn("Undefined variable 'nope'.\n[line 2]", self.stderr.getvalue())

	def test_runaway_recursion(self):
		text = 'fun dig(n) { return dig(n + 1); }\nprint "start";\ndig(0);'
		self.assertEqual(70, self.exit_code(self.script(text)))
		self.assertEqual("start\n", self.stdout.getvalue())
		self.assertIn("Stack overflow.\n[line 1]", self.stderr.getvalue())

	def test_missing_file(self):
		missing = str(Path(self.folder.name) / "nothing_here.lox")
		self.assertEqual(66, self.exit_code(missing))
		self.assertIn("Could not read", self.stderr.getvalue())

	def test_usage_error(self):
		self.assertEqual(64, self.exit_code("one.lox", "two.lox"))
		self.assertEqual(64, self.exit_code("--no-such-flag"))

	def test_check_does_not_run(self):
		self.assertEqual(0, self.exit_code("--check", self.script('print "should not appear";')))
		self.assertEqual("", self.stdout.getvalue())
		self.assertIn("Looks plausible to me.", self.stderr.getvalue())

	def test_check_still_finds_static_errors(self):
		with mock.patch.object(Report, "complain_to_console"):
			self.assertEqual(65, self.exit_code("-c", self.script("{ var a = a; }")))

	def test_tree(self):
		self.assertEqual(0, self.exit_code("-t", self.script("print 1 + 2 * 3;\nvar x = nope;")))
		self.assertEqual("(print (+ 1 (* 2 3)))\n(var x nope)\n", self.stdout.getvalue())

	def test_verbose_chatter(self):
		self.assertEqual(0, self.exit_code("-v", self.script("{ var a = 1; print a; }")))
		self.assertIn("Parsed 1 top-level statement(s).", self.stderr.getvalue())
		self.assertIn("Resolved 1 local reference(s).", self.stderr.getvalue())

	@mock.patch.object(Report, "complain_to_console")
	def test_too_many_issues(self, complain):
		text = "\n".join("print ;" for _ in range(40))
		self.assertEqual(65, self.exit_code(self.script(text)))
		self.assertIn("Giving up after a few issues.", self.stderr.getvalue())

class ReplTests(unittest.TestCase):

	def session(self, *lines) -> str:
		stdin = io.StringIO("".join(line + "\n" for line in lines))
		stdout = io.StringIO()
		with mock.patch("sys.stdin", stdin), mock.patch("sys.stdout", stdout), mock.patch("sys.stderr", io.StringIO()):
			with mock.patch.object(Report, "complain_to_console") as complain:
				with self.assertRaises(SystemExit) as cm:
					cmdline.main([])
		self.assertEqual(0, cm.exception.code)
		self.complaints = complain.call_count
		return stdout.getvalue()

	def test_prompt_and_shared_globals(self):
		output = self.session("var a = 1;", "fun f() { return a + 1; }", "print f();")
		self.assertEqual("> > > 2\n> \n", output)
		self.assertEqual(0, self.complaints)

	def test_mistakes_do_not_end_the_session(self):
		output = self.session("print ;", "print nope;", 'print "still here";')
		self.assertIn("still here\n", output)
		self.assertEqual(2, self.complaints)

	def test_empty_input(self):
		self.assertEqual("> \n", self.session())

if __name__ == '__main__':
	unittest.main()
