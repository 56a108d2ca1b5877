"""
Core domain: records, configuration, schema resolution, metadata and metrics.
"""
