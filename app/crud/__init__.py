# Import individual CRUD modules so they can be accessed via the package
from . import crud_user # noqa
from . import crud_like # noqa
from . import crud_match # noqa

__all__ = [
    "crud_user",
    "crud_like",
    "crud_match",
]
