"""
Infrastructure layer for the tool lending module: repository implementations
and external service adapters.
"""
