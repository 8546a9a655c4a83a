"""ScoutMerge REST API package.

Mount point: /api/v1/
Store:       injected through scoutmerge.api.deps.get_store
"""
