"""Snip & Sum: capture screen regions, recognize amounts and keep running totals."""
