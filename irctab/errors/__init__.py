from .internal import ConfigError, InternalError, NetworkError, ParsingError

__all__ = ["InternalError", "NetworkError", "ParsingError", "ConfigError"]
