"""Exception types raised by fieldstruct."""


class FieldStructError(Exception):
    """Base class for all fieldstruct errors."""


class TypeMismatchError(FieldStructError, TypeError):
    """A value is not a valid element, or an operand type is unsupported.

    Parameters
    ----------
    message : str
        Error message.
    fields : sequence of str, optional
        Names of the offending fields, when the error concerns a struct.
    """

    def __init__(self, message, fields=()):
        super().__init__(message)
        self.fields = tuple(fields)


class ShapeMismatchError(FieldStructError, ValueError):
    """Element operands differ in dtype, shape or sub-array count."""


class MissingFieldError(FieldStructError, KeyError):
    """One or more referenced fields are absent."""

    def __init__(self, message, fields=()):
        super().__init__(message)
        self.fields = tuple(fields)

    def __str__(self):
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0])


class NameCollisionError(FieldStructError, ValueError):
    """A target field name already exists, or two structs overlap."""

    def __init__(self, message, fields=()):
        super().__init__(message)
        self.fields = tuple(fields)


class SchemaMismatchError(FieldStructError, ValueError):
    """Two structs do not share exactly the same field names.

    Attributes
    ----------
    missing : tuple of str
        Field names present in the receiver but absent from the other struct.
    extra : tuple of str
        Field names present in the other struct but absent from the receiver.
    """

    def __init__(self, message, missing=(), extra=()):
        super().__init__(message)
        self.missing = tuple(missing)
        self.extra = tuple(extra)


class UnsupportedOperationError(FieldStructError, TypeError):
    """An element does not support the operation being broadcast."""

    def __init__(self, message, name=None, field=None):
        super().__init__(message)
        self.name = name
        self.field = field


class UnsupportedReferenceError(FieldStructError, AttributeError):
    """A name matches no property, operation or field of a struct."""

    def __init__(self, name):
        super().__init__(f"Unsupported reference {name!r}: not a property, operation or field")
        self.name = name


class PersistenceError(FieldStructError, OSError):
    """Reading persisted elements failed.

    Attributes
    ----------
    path : pathlib.Path or None
        The offending file or directory.
    """

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path

    def __str__(self):
        return str(self.args[0])
