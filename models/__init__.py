"""Data access and business operations, one module per entity."""
