"""
This is the overall control for a run: scan, parse, resolve, and only then evaluate.
Each phase gets to finish and report everything it can before the run is called off.
"""
import sys
from typing import Optional, TextIO
from ..diagnostics import Report
from ..front_end import parse_text
from ..resolution import resolve
from .evaluator import Interpreter

# Every Lox call costs the evaluator a dozen or so Python frames.
RECURSION_LIMIT = 10_000

def check_source(text:str, report:Report, filename:Optional[str]=None):
	""" Everything short of running it. Answers the statements and the side-table, or None if sick. """
	statements = parse_text(text, report, filename)
	if report.sick(): return None
	report.info("Parsed %d top-level statement(s)." % len(statements))
	side_table = resolve(statements, report)
	if report.sick(): return None
	report.info("Resolved %d local reference(s)." % len(side_table))
	return statements, side_table

def run_source(
		text:str,
		report:Report,
		*,
		interpreter:Optional[Interpreter]=None,
		out:Optional[TextIO]=None,
		filename:Optional[str]=None,
) -> Interpreter:
	"""
	Returns the interpreter so that a REPL can keep its globals from line to line.
	Whether it all went well is for the report to say.
	"""
	if sys.getrecursionlimit() < RECURSION_LIMIT:
		sys.setrecursionlimit(RECURSION_LIMIT)
	if interpreter is None:
		interpreter = Interpreter(report, out=out)
	checked = check_source(text, report, filename)
	if checked is not None:
		statements, side_table = checked
		interpreter.resolve(side_table)
		interpreter.interpret(statements)
	return interpreter
