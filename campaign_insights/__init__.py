"""
campaign-insights: ingestion-and-metrics engine for campaign analytics exports.

Turns a raw CSV export plus its filename into campaign metadata, a resolved
column schema, a metrics record and configurable marketing funnels.
"""

__version__ = "0.1.0"
