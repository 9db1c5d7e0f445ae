"""calcdesk HTTP API."""
