from . import concurrent_dict  # re-export module

__all__ = ["concurrent_dict"]
