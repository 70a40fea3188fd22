from .interpreter import HELP_TEXT, CommandInterpreter

__all__ = ["CommandInterpreter", "HELP_TEXT"]
