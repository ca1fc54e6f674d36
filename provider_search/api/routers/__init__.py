# This file marks the routers package for API route modules.
# Endpoint modules are grouped by concern: health checks and provider search.
