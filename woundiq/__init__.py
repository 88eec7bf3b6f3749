"""
WoundIQ API - authentication and token lifecycle for clinical wound-assessment tracking.
"""
