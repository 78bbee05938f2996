"""
Neumark: capped reward issuance curve in fixed-point integer arithmetic.

Quick reference:
    from neumark.curve import cumulative, incremental, incremental_inverse

    issued = incremental(total_contributed, contribution)
    refund = incremental_inverse(total_contributed, issued_to_retire)

See `neumark.curve` for the curve itself, `neumark.cli` for the command
line front end.
"""

__version__ = "0.1.0"
