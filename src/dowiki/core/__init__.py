"""Core wiki components: models, storage, rendering and routing."""
