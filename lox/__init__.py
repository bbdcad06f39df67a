"""
A tree-walking interpreter for the Lox language.
"""
