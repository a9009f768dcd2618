"""
core — Constants, structured logging, and configuration.

Every other package imports its ambient concerns from here; nothing below
``core`` reads YAML or opens log files directly.
"""
