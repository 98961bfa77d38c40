import socketio
import logging
import uuid
from typing import Awaitable, Callable, Dict

from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app import crud, models, security
from app.db.session import AsyncSessionLocal
from app.schemas.token import TokenPayload
from app.services import matching_service
from app.services.discovery_session import DiscoverySession

logger = logging.getLogger(__name__)

# In-memory per-process state: {sid: user_id} and {sid: deck}.
sid_user_map: Dict[str, uuid.UUID] = {}
discovery_sessions: Dict[str, DiscoverySession] = {}

DeckAction = Callable[[DiscoverySession, AsyncSession, models.User], Awaitable[None]]


async def _get_user_from_token(token: str, db: AsyncSession) -> uuid.UUID | None:
    """Helper to validate token and get user ID."""
    if not token:
        return None
    try:
        token_data = TokenPayload(**security.decode_access_token(token))
    except (JWTError, ValidationError) as e:
        logger.warning(f"Token validation error: {e}")
        return None
    if token_data.user_id is None:
        logger.warning("Token payload missing user_id")
        return None

    user = await crud.crud_user.get_user_by_id(db, user_id=token_data.user_id)
    if user is None:
        return None
    return user.id


def register_socketio_handlers(sio: socketio.AsyncServer):
    async def emit_state(sid: str, deck: DiscoverySession):
        await sio.emit('discovery_state', deck.snapshot(), room=sid)

    async def run_deck_action(sid: str, event: str, action: DeckAction):
        user_id = sid_user_map.get(sid)
        deck = discovery_sessions.get(sid)
        if not user_id or deck is None:
            logger.warning(f"Received '{event}' from unknown sid: {sid}")
            return

        async with AsyncSessionLocal() as db:
            user = await crud.crud_user.get_user_by_id(db, user_id=user_id)
            if user is None:
                logger.warning(f"User {user_id} for sid {sid} no longer exists.")
                return
            await action(deck, db, user)
        await emit_state(sid, deck)

    @sio.event
    async def connect(sid, environ, auth):
        """Handles new client connections with authentication."""
        token = auth.get('token') if auth else None
        if not token:
            logger.warning(f"Connection refused for {sid}: No token provided.")
            return False

        async with AsyncSessionLocal() as db:
            user_id = await _get_user_from_token(token, db)

        if not user_id:
            logger.warning(f"Connection refused for {sid}: Token is invalid or user not found.")
            return False

        sid_user_map[sid] = user_id
        discovery_sessions[sid] = DiscoverySession()
        await sio.enter_room(sid, str(user_id))
        logger.info(f"Authenticated {sid} for user_id {user_id}; joined room '{user_id}'")

    @sio.event
    async def disconnect(sid):
        """Handles client disconnections."""
        user_id = sid_user_map.pop(sid, None)
        discovery_sessions.pop(sid, None)
        if user_id:
            logger.info(f"Removed mapping for sid {sid} (User: {user_id}).")
        else:
            logger.warning(f"Sid {sid} disconnected but had no user mapping.")

    # --- Discovery deck ---
    @sio.on('discovery_load')
    async def handle_discovery_load(sid, data=None):
        async def action(deck, db, user):
            await deck.load(lambda: matching_service.get_potential_matches(db, current_user=user))
        await run_deck_action(sid, 'discovery_load', action)

    @sio.on('discovery_refresh')
    async def handle_discovery_refresh(sid, data=None):
        async def action(deck, db, user):
            await deck.refresh(lambda: matching_service.get_potential_matches(db, current_user=user))
        await run_deck_action(sid, 'discovery_refresh', action)

    @sio.on('discovery_like')
    async def handle_discovery_like(sid, data=None):
        async def action(deck, db, user):
            await deck.like(
                lambda to_user_id: matching_service.like_user(db, current_user=user, to_user_id=to_user_id)
            )
        await run_deck_action(sid, 'discovery_like', action)

    @sio.on('discovery_pass')
    async def handle_discovery_pass(sid, data=None):
        deck = discovery_sessions.get(sid)
        if deck is None:
            logger.warning(f"Received 'discovery_pass' from unknown sid: {sid}")
            return
        deck.pass_()
        await emit_state(sid, deck)

    @sio.on('discovery_close_notification')
    async def handle_close_notification(sid, data=None):
        deck = discovery_sessions.get(sid)
        if deck is None:
            return
        deck.close_match_notification()
        await emit_state(sid, deck)

    @sio.on('discovery_start_chat')
    async def handle_start_chat(sid, data=None):
        deck = discovery_sessions.get(sid)
        if deck is None:
            return
        chat_with = deck.start_chat()
        if chat_with:
            await sio.emit('open_chat', {'user_id': str(chat_with)}, room=sid)
        await emit_state(sid, deck)
