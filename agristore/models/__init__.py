from . import dtos, entities, forms, mapping, validation

__all__ = ["dtos", "entities", "forms", "mapping", "validation"]
