"""
Lead Reconciler.

Entity resolution and progressive enrichment of Leads and Companies
ingested from external data-provider jobs.
"""

__version__ = "0.1.0"
