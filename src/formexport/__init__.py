"""
FORMEXPORT - Form submission export tool.

This package provides tools for selecting the exportable fields of a form,
projecting its submissions onto rows, and streaming them as a delimited
(CSV) document.
"""

__version__ = "0.1.0"
