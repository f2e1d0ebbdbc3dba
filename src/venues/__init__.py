"""
Resource access for datasets.

Fetches dataset text over HTTP or from the local data root without coupling
the loader to where a file lives.
"""
