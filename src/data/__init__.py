"""
CSV dataset ingestion for the charts.

Line parsing, the async loader with its error taxonomy, and the named
per-chart datasets.
"""
