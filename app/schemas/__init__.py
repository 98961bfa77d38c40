# flake8: noqa
from .token import TokenPayload
from .profile import ProfileProjection
from .matching import LikeCreate, LikeResult, MatchList
