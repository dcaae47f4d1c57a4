from .proxy import ExaProxy
