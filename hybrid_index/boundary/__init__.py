"""
Boundary layer: persistent store and embedding provider adapters.
"""
