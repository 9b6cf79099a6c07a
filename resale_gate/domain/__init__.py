"""Domain layer for the listing admission engine.

Pure types and rules: payload variants, ticket lifecycle, listing records,
event records and the closed admission error taxonomy. No I/O.
"""
