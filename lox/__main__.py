"""
Run as `python -m lox [script]`; see lox.cmdline for the arguments.
"""
from lox.cmdline import main

main()
