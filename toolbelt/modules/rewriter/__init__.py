"""Redirect rewriter commands."""
