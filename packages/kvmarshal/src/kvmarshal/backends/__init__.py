from .memory import MapKV

__all__ = ["MapKV"]
