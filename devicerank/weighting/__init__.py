# Weighting package for the DeviceRank Engine
"""
Preset registry and weight resolution.

Every resolved WeightVector sums to 1, whatever the caller asked for.
"""
