"""
Conversation service driving chat-based trip modification.

Each chat session moves through a small state machine:

    IDLE -> CLASSIFYING -> RESPONDING_ONLY -------------------> IDLE
                        -> AWAITING_CONFIRMATION -> EXECUTING -> IDLE
                        -> EXECUTING ----------------------------> IDLE

A detected action that needs confirmation is parked on the session until
the client confirms or rejects it; the trip is untouched until then.
"""

import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from trip_assistant.agents.gateway import AIGateway
from trip_assistant.data.models import MAX_MESSAGE_LENGTH, CamelModel, Trip
from trip_assistant.data.plan_models import ActionDetection
from trip_assistant.services.trip_service import TripService
from trip_assistant.utils.error_handling import (
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from trip_assistant.utils.helpers import generate_session_id
from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)

REJECT_REPLY = "No problem, I've left your trip as it is."

# Idle sessions, and unanswered confirmations, are dropped after this long
SESSION_TTL = timedelta(hours=1)


class SessionState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    RESPONDING_ONLY = "responding_only"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"


@dataclass
class PendingAction:
    action: str
    params: dict[str, Any]
    trip_id: str
    confirmation_message: str = ""


@dataclass
class ChatSession:
    session_id: str
    state: SessionState = SessionState.IDLE
    pending: PendingAction | None = None
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class SessionStore:
    """
    In-process chat sessions. State changes happen under one lock.

    Sessions resting in IDLE or AWAITING_CONFIRMATION for longer than
    ``ttl`` are evicted whenever a session is looked up or created, so a
    stale pending action can no longer be confirmed.
    """

    def __init__(self, ttl: timedelta = SESSION_TTL):
        self._sessions: dict[str, ChatSession] = {}
        self._lock = threading.Lock()
        self.ttl = ttl

    def __len__(self) -> int:
        return len(self._sessions)

    def _evict_expired(self) -> None:
        cutoff = datetime.now(UTC) - self.ttl
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.state in (SessionState.IDLE, SessionState.AWAITING_CONFIRMATION)
            and session.updated_at < cutoff
        ]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired chat sessions")

    def get(self, session_id: str) -> ChatSession:
        with self._lock:
            self._evict_expired()
            session = self._sessions.get(session_id)
        if session is None:
            raise ResourceNotFoundError(f"Chat session not found: {session_id}")
        return session

    def get_or_create(self, session_id: str | None) -> ChatSession:
        with self._lock:
            self._evict_expired()
            session_id = session_id or generate_session_id()
            session = self._sessions.get(session_id)
            if session is None:
                session = ChatSession(session_id=session_id)
                self._sessions[session_id] = session
            return session

    def begin_classifying(self, session: ChatSession) -> None:
        """IDLE or AWAITING_CONFIRMATION -> CLASSIFYING."""
        with self._lock:
            if session.state not in (
                SessionState.IDLE,
                SessionState.AWAITING_CONFIRMATION,
            ):
                raise ConflictError(
                    f"Session {session.session_id} is busy ({session.state.value})"
                )
            if session.pending:
                logger.info(
                    f"Session {session.session_id}: new message discards "
                    f"pending {session.pending.action}"
                )
            session.pending = None
            self._set(session, SessionState.CLASSIFYING)

    def park(self, session: ChatSession, pending: PendingAction) -> None:
        with self._lock:
            session.pending = pending
            self._set(session, SessionState.AWAITING_CONFIRMATION)

    def take_pending(self, session: ChatSession, next_state: SessionState) -> PendingAction:
        """Remove the parked action, moving to ``next_state``."""
        with self._lock:
            if (
                session.state is not SessionState.AWAITING_CONFIRMATION
                or session.pending is None
            ):
                raise ConflictError(
                    f"No action awaiting confirmation in session {session.session_id}"
                )
            pending = session.pending
            session.pending = None
            self._set(session, next_state)
            return pending

    def move(self, session: ChatSession, state: SessionState) -> None:
        with self._lock:
            self._set(session, state)

    def _set(self, session: ChatSession, state: SessionState) -> None:
        logger.debug(
            f"Session {session.session_id}: {session.state.value} -> {state.value}"
        )
        session.state = state
        session.updated_at = datetime.now(UTC)


class ModificationOutcome(CamelModel):
    trip: Trip
    changes: list[str]
    suggestion: str | None = None


class FlowOutcome(CamelModel):
    """What one chat message led to."""

    session_id: str
    state: SessionState
    detection: ActionDetection
    reply: str | None = None
    result: ModificationOutcome | None = None


class ConversationService:
    """Runs chat messages through classification, confirmation and execution."""

    def __init__(
        self,
        trip_service: TripService,
        gateway: AIGateway,
        sessions: SessionStore | None = None,
    ):
        self.trip_service = trip_service
        self.gateway = gateway
        self.sessions = sessions or SessionStore()

    def _check_input(self, message: str) -> None:
        # HTTP bodies are already checked by the request schemas
        if not message or not message.strip():
            raise ValidationError("Message is empty")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message too long ({len(message)} chars, max {MAX_MESSAGE_LENGTH})"
            )

    def _find_trip(self, trip_id: str | None) -> Trip | None:
        """The trip for context, or None when no id is given or it is unknown."""
        if not trip_id:
            return None
        trip = self.trip_service.repo.get_trip(trip_id)
        if trip is None:
            logger.info(f"Chat references unknown trip {trip_id}; answering without it")
        return trip

    async def chat(self, message: str, trip_id: str | None = None) -> str:
        """Free-form reply, with the trip as context when it exists."""
        self._check_input(message)
        trip = self._find_trip(trip_id)
        return await self.gateway.chat(message, trip)

    async def handle_message(
        self,
        message: str,
        trip_id: str | None = None,
        session_id: str | None = None,
    ) -> FlowOutcome:
        """
        Classify ``message`` and advance the session.

        Args:
            message: User's chat message
            trip_id: Trip the conversation is about (optional)
            session_id: Existing session (optional, generated when omitted)

        Returns:
            The classification, the session's resting state, and either a
            reply or the applied modification
        """
        self._check_input(message)
        trip = self._find_trip(trip_id)

        session = self.sessions.get_or_create(session_id)
        self.sessions.begin_classifying(session)
        try:
            detection = await self.gateway.detect_action(message, trip)
        except Exception:
            self.sessions.move(session, SessionState.IDLE)
            raise

        if not detection.has_action or trip is None:
            self.sessions.move(session, SessionState.RESPONDING_ONLY)
            try:
                reply = detection.response or await self.gateway.chat(message, trip)
            finally:
                self.sessions.move(session, SessionState.IDLE)
            return FlowOutcome(
                session_id=session.session_id,
                state=session.state,
                detection=detection,
                reply=reply,
            )

        if detection.needs_confirmation:
            pending = PendingAction(
                action=detection.action,
                params=detection.params,
                trip_id=trip.id,
                confirmation_message=detection.confirmation_message,
            )
            self.sessions.park(session, pending)
            return FlowOutcome(
                session_id=session.session_id,
                state=session.state,
                detection=detection,
                reply=detection.confirmation_message
                or f"Shall I apply {detection.action.replace('_', ' ')}?",
            )

        self.sessions.move(session, SessionState.EXECUTING)
        result = await self._execute(
            session, PendingAction(detection.action, detection.params, trip.id)
        )
        return FlowOutcome(
            session_id=session.session_id,
            state=session.state,
            detection=detection,
            result=result,
        )

    async def confirm(self, session_id: str) -> ModificationOutcome:
        """
        Execute the session's pending action.

        Raises:
            ResourceNotFoundError: If the session is unknown
            ConflictError: If nothing is awaiting confirmation
        """
        session = self.sessions.get(session_id)
        pending = self.sessions.take_pending(session, SessionState.EXECUTING)
        return await self._execute(session, pending)

    def reject(self, session_id: str) -> str:
        """Discard the session's pending action, leaving the trip unchanged."""
        session = self.sessions.get(session_id)
        pending = self.sessions.take_pending(session, SessionState.IDLE)
        logger.info(f"Session {session_id}: {pending.action} rejected")
        return REJECT_REPLY

    async def _execute(
        self, session: ChatSession, pending: PendingAction
    ) -> ModificationOutcome:
        try:
            trip, result = await self.trip_service.modify_trip(
                pending.trip_id, pending.action, pending.params
            )
        finally:
            self.sessions.move(session, SessionState.IDLE)
        return ModificationOutcome(
            trip=trip, changes=result.changes, suggestion=result.suggestion
        )
