# This file marks the schemas package for API response models.
# Search, health, and shared envelope contracts live in sibling modules.
