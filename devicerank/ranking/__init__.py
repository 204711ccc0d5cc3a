# Ranking package for the DeviceRank Engine
"""
Deterministic device ranking modules.

Provides explainable scoring where every sub-score is
decomposable into human-readable reasons.
"""
