"""Infrastructure layer: persistence, storage backends, outbound HTTP."""
