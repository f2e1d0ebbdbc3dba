"""
Configuration loading and validation.

Provides strongly typed settings for the data root, HTTP timeout, text
encoding and log level, loaded from environment variables.
"""
