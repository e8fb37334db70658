"""Operator helper scripts."""
