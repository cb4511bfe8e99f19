"""
Domain layer for the tool lending module: models, repository interfaces and services.
"""
