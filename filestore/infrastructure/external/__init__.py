"""External integrations: storage backends and outbound HTTP."""
