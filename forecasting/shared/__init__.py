"""Cross-cutting concerns shared by all layers."""
