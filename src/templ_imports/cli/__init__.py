"""
Command Line Interface for templ-imports.
"""
