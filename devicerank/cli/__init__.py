# CLI package for the DeviceRank Engine
"""
Read-only CLI interface for running DeviceRank locally.

Commands:
    devicerank presets  — List weight presets
    devicerank rank     — Show ranked devices
    devicerank explain  — Show explanation for a device
"""
