"""
The evaluator proper, with its value-types and run control.
"""
