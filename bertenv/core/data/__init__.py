"""Static data tables (CUDA channels, driver minimums)."""
