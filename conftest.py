"""
Makes the repository root importable so tests can use `from src.fortis...`.
"""
