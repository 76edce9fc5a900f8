"""Connector Ident test suite."""
