"""HTTP surface and image ingestion for the Virtual Fitting Room."""
