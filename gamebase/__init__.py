"""Game-support utilities: hex dumps, chunk files, PNG and WAV loading, and a software audio mixer."""

__version__ = "0.1.0"

__all__ = ["chunks", "data_path", "hex_dump", "png", "sound", "wav"]