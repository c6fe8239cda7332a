# Import individual CRUD modules so they can be accessed via the package
from . import crud_user # noqa
from . import crud_match # noqa
from . import crud_message # noqa
from .crud_message import message # Make the message instance directly available on crud package

__all__ = [
    "crud_user",
    "crud_match",
    "crud_message",
    "message",
]
