import sys, random
from typing import Optional
from boozetools.support.failureprone import SourceText, illustration

from .tokens import Token, TokenKind

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm. ", "", ""]
	exclamations = [
		'Bother', 'Drat', 'Fiddlesticks', 'Goodness', 'Nuts', 'Rats',
		'Heavens', 'Oops', 'Shucks', 'Yikes',
	]
	resignations = [
		'That program will not run as written.',
		'I cannot continue.',
		'Something is amiss.',
		'Have a look at the following:',
	]
	return "%s%s! %s"%tuple(map(random.choice, (particle, exclamations, resignations)))

class Report:
	"""
	The one place a run keeps track of what went wrong.
	Static issues (from the scanner, parser, and resolver) accumulate;
	a run-time failure is recorded separately, because it means something different to the driver.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=25):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._source = SourceText("")
		self._runtime_failure = None

	def set_source(self, text:str, filename:Optional[str]=None):
		self._source = SourceText(text, filename=filename)

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> list["Pic"]: return list(self._issues)

	@property
	def had_runtime_error(self) -> bool: return self._runtime_failure is not None

	@property
	def runtime_failure(self): return self._runtime_failure

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()
		self._runtime_failure = None

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	# Methods the scanner, parser, and resolver call:

	def error(self, token:Token, msg:str):
		""" A static error at a particular token """
		if token.kind is TokenKind.EOF:
			intro = "[line %d] Error at end: %s" % (token.line, msg)
			self.issue(Pic(intro, []))
		else:
			intro = "[line %d] Error at '%s': %s" % (token.line, token.lexeme, msg)
			problem = [Annotation(self._source, token.line, token.offset, len(token.lexeme))]
			self.issue(Pic(intro, problem))

	def error_at_line(self, line:int, offset:int, msg:str):
		""" The scanner has no token to blame, just a position. """
		intro = "[line %d] Error: %s" % (line, msg)
		self.issue(Pic(intro, [Annotation(self._source, line, offset, 1)]))

	# The evaluator calls this:

	def runtime_error(self, err):
		self._runtime_failure = err

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		issues = list(self._issues)
		if self._runtime_failure is not None:
			err = self._runtime_failure
			issues.append(Pic(err.message, [], footer=["[line %d]" % err.token.line]))
		_bemoan(issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

class Annotation:
	def __init__(self, source:SourceText, line:int, offset:int, width:int, caption:str=""):
		self.source = source
		self.line = line
		self.offset = offset
		self.width = width
		self.caption = caption
	def illustrate(self):
		row, col = self.source.find_row_col(self.offset)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, self.width, prefix='% 6d |' % self.line, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	@property
	def intro(self): return self._intro
	def as_text(self):
		lines = [self._intro]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
