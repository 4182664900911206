"""Form engine exceptions."""


class FieldFormError(Exception):
    """Base class for all form engine errors."""


class ConfigurationError(FieldFormError):
    """Raised when field metadata is inconsistent with the annotated schema.

    Always fatal to the render pass: a visibility expression naming a missing
    member, a widget kind forced onto an incompatible field type, or a custom
    GUI callable with the wrong signature are programming mistakes.
    """


class ValueParseError(FieldFormError, ValueError):
    """Raised by strict parsers when user text cannot become the field type.

    Committing editors catch this and substitute the type's zero value.
    """
