"""
Package marker for the provider discovery service under `provider_search`.
It groups the API layer, the search core, and the provider store helpers under one import path.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
