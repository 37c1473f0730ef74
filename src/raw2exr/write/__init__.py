from .exr_writer import ExrWriteError, write_linear_exr

__all__ = ["ExrWriteError", "write_linear_exr"]
