from . import matches # noqa
