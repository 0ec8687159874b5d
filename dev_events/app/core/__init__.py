"""Configuration, logging and the document/blob store adapters."""
