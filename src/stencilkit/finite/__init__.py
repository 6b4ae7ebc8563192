"""Finite-difference formula derivation.

This subpackage builds and solves the exact elimination system, analyses the
truncation error, and searches smaller stencils when a request fails.
"""
