__title__ = "httpseam"
__description__ = "A transport-agnostic HTTP client abstraction."
__version__ = "0.3.0"
