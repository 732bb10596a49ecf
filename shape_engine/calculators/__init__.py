"""
Deterministic calculation engine.

Pure Python math over Decimal, no I/O.
Given a catalog shape, a material and parameter values,
produce dimensions, weights and an itemized cost estimate.
"""
