"""Core domain logic package.

This package contains the pure export pipeline: field selection, row
projection and table encoding. Modules here must not touch the filesystem
or read global settings; all inputs arrive as explicit parameters.
"""
