"""
Feature modules of ToolLender.
"""
