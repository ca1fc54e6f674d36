"""Provider store table layout, record shapes, and bootstrap helpers."""
