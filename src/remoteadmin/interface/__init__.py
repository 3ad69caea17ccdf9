"""
Interface layer: command-line interface.
"""
