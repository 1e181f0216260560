# shapeforge/logging/tags.py
"""
Central place for logging subsystem tags.

Changing a tag here updates it project-wide.
"""

MODEL = "[MODEL]"
SYMBOLS = "[SYMBOLS]"
SECTIONS = "[SECTIONS]"
DECORATORS = "[DECORATORS]"
GENERATOR = "[GENERATOR]"
PROTOCOL = "[PROTOCOL]"
PIPELINE = "[PIPELINE]"
DIAGNOSTICS = "[DIAGNOSTICS]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
