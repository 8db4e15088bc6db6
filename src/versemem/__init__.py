"""versemem: spaced-repetition scheduling for memorizing Bible verses."""

from versemem.consts import VERSION

__version__ = VERSION
