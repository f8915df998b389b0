"""Route handlers following Single Responsibility Principle

Each router module handles a single resource/concept:
- search: Full-text query over the notes index
- health: Health/monitoring endpoints
"""
