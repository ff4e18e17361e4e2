"""Pet store REST API service."""
