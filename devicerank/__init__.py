# DeviceRank Engine
# Multi-criteria device ranking

"""
Core invariant: every score is reproducible and explainable.

Given the same devices, weights and reference date, the engine returns
the same ranking, and every total decomposes into eight category
sub-scores with human-readable reasons.
"""
