"""
Application Layer

Use cases that coordinate the domain with infrastructure adapters.

Structure:
- interfaces/: Port interfaces for infrastructure adapters (catalog, speech,
  audio channels, presentation, voice)
- services/: The per-guild playback orchestrator and its registry
- queries/: Read operations (SearchCatalogQuery)
"""
