"""
This is an interpreter for the Lox programming language.

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox

with no arguments starts an interactive session, one line at a time.

    lox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

# Exit statuses, after the BSD sysexits convention.
EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

class _ArgumentParser(argparse.ArgumentParser):
	def error(self, message):
		self.print_usage(sys.stderr)
		self.exit(EX_USAGE, "%s: error: %s\n" % (self.prog, message))

parser = _ArgumentParser(
	prog="lox",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("script", nargs="?", help="Path to a Lox program. Omit it for an interactive session.")
parser.add_argument('-c', "--check", action="store_true", help="Scan, parse, and resolve the program but do not actually run it.")
parser.add_argument('-t', "--tree", action="store_true", help="Print the syntax tree of each top-level statement instead of running.")
parser.add_argument('-v', "--verbose", action="count", default=0, help="Chatter about progress on stderr.")

def run(args) -> int:
	if args.script is None:
		return repl(args, sys.stdin)
	path = Path(args.script)
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EX_NOINPUT
	return run_text(args, text, str(path))

def run_text(args, text:str, filename:str) -> int:
	from .diagnostics import Report, TooManyIssues
	from .tree_walker.executive import check_source, run_source
	report = Report(verbose=args.verbose)
	try:
		if args.tree:
			_print_trees(text, report, filename)
		elif args.check:
			check_source(text, report, filename)
		else:
			run_source(text, report, filename=filename)
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return EX_DATAERR
	if report.sick():
		report.complain_to_console()
		return EX_DATAERR
	if report.had_runtime_error:
		report.complain_to_console()
		return EX_SOFTWARE
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
	return EX_OK

def _print_trees(text, report, filename):
	from .front_end import parse_text
	from .printer import TreePrinter
	statements = parse_text(text, report, filename)
	printer = TreePrinter()
	for stmt in statements:
		print(printer.render(stmt))

def repl(args, stdin) -> int:
	"""
	Each line runs against the same global scope. Mistakes get reported,
	and then the session carries on as if that line never happened.
	"""
	from .diagnostics import Report, TooManyIssues
	from .tree_walker.evaluator import Interpreter
	from .tree_walker.executive import run_source
	report = Report(verbose=args.verbose)
	interpreter = Interpreter(report)
	while True:
		print("> ", end="", flush=True)
		line = stdin.readline()
		if not line:
			print()
			return EX_OK
		try: run_source(line, report, interpreter=interpreter)
		except TooManyIssues: pass
		if report.sick() or report.had_runtime_error:
			report.complain_to_console()
		report.reset()

def main(argv=None):
	sys.exit(run(parser.parse_args(argv)))

if __name__ == '__main__':
	main()
