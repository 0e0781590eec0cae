"""
Vitalens EMR backend.
"""
