# This file marks the services package for API data-access and search logic modules.
# Routers depend on service classes here instead of issuing SQL themselves.
