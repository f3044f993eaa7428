"""Infrastructure adapters: storage backends and external clients."""
