"""
Text helpers shared by the mapper, unit builder and grouping engine.
"""
