"""HTTP adapters for kernel primitives."""
