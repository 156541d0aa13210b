"""Turn/action processing helpers.

This package centralizes turn order and action validation so both the REST
transport and direct callers flow through the same checks.
"""
