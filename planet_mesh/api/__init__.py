"""HTTP interface for mesh generation."""
