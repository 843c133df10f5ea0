"""
Restaurant aggregate manager.

Responsibilities:
- Create, read, update and delete restaurant aggregates.
- Derive each restaurant's geolocation from its postal address.
- Resolve search requests into exactly one document store query.
- Persist aggregates as whole documents in the document store.
"""
