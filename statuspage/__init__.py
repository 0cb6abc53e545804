"""Multi-tenant status page API."""
