"""Domain layer: framework-free business objects and rules."""
