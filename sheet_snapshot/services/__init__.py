"""Run-level services: orchestration, reporting metadata, progress and output."""
