"""Pure domain utilities: the greeting text.

Free of FastAPI/HTTP concerns so both the server and the smoke runner can
use it.
"""
__all__ = ["greeting"]
