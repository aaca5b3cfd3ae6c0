"""Backend generators and the type-mapping engine."""
