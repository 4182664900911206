"""
pyqt-fieldforms: reflection-driven dynamic forms for PyQt6.

Declare a dataclass, annotate its fields with Draw rules, and get an
editable form that writes the user's edits back into the instance.

Architecture:
- Tier 1 (Core): Pure PyQt6 utilities (frame scheduling)
- Tier 2 (Protocols): Render surface ABCs, widget ABCs and adapters, config
- Tier 3 (Services): Session state, scope tokens, change notification
- Tier 4 (Forms): Immediate-mode engine that walks a container every frame
- Tier 5 (Widgets): QtSurface and the embeddable FieldFormWidget

Key Features:
- Type-based editor selection with per-field Draw overrides
- Conditional visibility ("Field|Value" and "#Property|Value")
- Nested containers with collapsible groups and layout directives
- Vectors, colors, arrays, enums, bit flags and key chord capture
- Headless surface for scripting and tests
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
