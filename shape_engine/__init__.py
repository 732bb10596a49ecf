"""
Parametric shape calculation engine.

Catalog-driven: shapes are data (parameters plus formula strings), and one
pipeline turns a shape, a material and parameter values into weight, blank
and scrap figures and an itemized cost estimate.
"""
