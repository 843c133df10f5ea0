"""
Review consistency engine.

Responsibilities:
- Create, list, read, update and delete reviews embedded in a restaurant.
- Enforce one review per author and the author-only edit window.
- Recompute the restaurant's average rating after every review mutation.
- Sort and page the embedded review collection in memory.
"""
