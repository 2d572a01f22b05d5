"""
Horo spatial audio tools.
"""
