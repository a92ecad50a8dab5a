"""Kotlin inspection: replace builtin array constructor calls in annotations with [...] literals."""

__version__ = "0.1.0"
