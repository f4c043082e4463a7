"""Projection, normalization, aggregation and recognition scheduling."""
