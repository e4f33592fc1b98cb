"""Operator overload dispatch for dynamically typed expression evaluators."""

__version__ = "0.1.0"
