class ConcreteLabError(Exception):
    """Base class for errors raised by the concrete lab engine."""

class InvalidPackRequest(ConcreteLabError, ValueError):
    """A pack request with a non-positive count or a negative age."""

class UnknownPreset(ConcreteLabError, ValueError):
    """A dimension preset that maps to no known specimen geometry."""

class TestNotFound(ConcreteLabError, LookupError):
    """No concrete test with the requested id."""

    __test__ = False  # keep pytest from collecting this class

class SpecimenNotFound(ConcreteLabError, LookupError):
    """No specimen with the requested number in the test."""

class FileLockException(ConcreteLabError):
    pass

class PersistenceError(ConcreteLabError):
    """The store refused a write; the working copy was rolled back."""
