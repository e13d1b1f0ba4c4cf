"""Protocol adapters for serving the IBGE tools."""
