"""
Application layer for the tool lending module.
"""
