"""Cross-cutting services: nested stage profiling."""
