"""
Shared utilities: configuration, logging, validation
"""
