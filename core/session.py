"""Chat session controller: one chat turn from validated request to closed stream.

RECEIVED -> VALIDATED -> STREAMING -> (RENAMING) -> COMPLETED, with ABORTED
reachable from every state before COMPLETED. The channel is closed exactly
once on every path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from api.schemas.responses import AbortEvent, RenameThreadAction, ThreadRef
from config import Settings, get_model_tag, settings as default_settings
from core.channel import ResponseChannel
from core.exceptions import EmptyMessageError, QuotaExceededError
from core.interfaces import ChatEngine, EventLogSink, TelemetrySink, ThreadRenamer
from core.models import AttachmentRef, ChatRequest, Thread, User, Workspace
from core.quota import QuotaGate
from core.title import summarize_title

logger = logging.getLogger(__name__)

SENT_CHAT_EVENT = "sent_chat"


class SessionState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    STREAMING = "streaming"
    RENAMING = "renaming"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass
class SessionOutcome:
    state: SessionState
    renamed: Thread | None = None
    error: str | None = None


class ChatSessionController:
    """Runs chat turns against a chat engine and its side-channel collaborators.

    Holds no per-session state, so one instance serves concurrent sessions.
    """

    def __init__(
        self,
        engine: ChatEngine,
        renamer: ThreadRenamer,
        telemetry: TelemetrySink,
        event_logs: EventLogSink,
        quota_gate: QuotaGate | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.engine = engine
        self.renamer = renamer
        self.telemetry = telemetry
        self.event_logs = event_logs
        self.quota_gate = quota_gate or QuotaGate()
        self.settings = settings or default_settings

    def validate(
        self, message: str | None, attachments: list[AttachmentRef] | None = None
    ) -> ChatRequest:
        """RECEIVED -> VALIDATED. Raises EmptyMessageError for an empty message."""
        if not message:
            raise EmptyMessageError()
        return ChatRequest(message=message, attachments=list(attachments or []))

    async def run(
        self,
        request: ChatRequest,
        channel: ResponseChannel,
        workspace: Workspace,
        user: User | None,
        thread: Thread | None = None,
    ) -> SessionOutcome:
        """Stream one validated chat turn into ``channel`` and close it."""
        outcome = SessionOutcome(state=SessionState.VALIDATED)
        try:
            channel.open()
            outcome.state = SessionState.STREAMING
            self.quota_gate.check(user, self.settings.multi_user_mode)

            await self.engine.stream_chat(
                channel=channel,
                workspace=workspace,
                message=request.message,
                chat_mode=workspace.chat_mode,
                user=user,
                thread=thread,
                attachments=request.attachments,
            )

            if thread is not None:
                outcome.state = SessionState.RENAMING
                outcome.renamed = await self._auto_rename(
                    channel, request, workspace, user, thread
                )

            await self._record_sent_chat(
                request, workspace, user, outcome.renamed or thread
            )
            outcome.state = SessionState.COMPLETED
        except QuotaExceededError as exc:
            outcome.state = SessionState.ABORTED
            outcome.error = exc.message
            await self._abort(channel, exc.message)
        except Exception as exc:
            logger.exception(
                "Chat session failed for workspace %s: %s", workspace.slug, exc
            )
            outcome.state = SessionState.ABORTED
            outcome.error = str(exc)
            await self._abort(channel, str(exc))
        finally:
            await channel.close()
        return outcome

    async def _abort(self, channel: ResponseChannel, error: str) -> None:
        try:
            await channel.write(AbortEvent(error=error))
        except Exception:
            logger.warning("Could not deliver abort event", exc_info=True)

    async def _auto_rename(
        self,
        channel: ResponseChannel,
        request: ChatRequest,
        workspace: Workspace,
        user: User | None,
        thread: Thread,
    ) -> Thread | None:
        try:
            renamed = await self.renamer.auto_rename_thread(
                thread=thread,
                workspace=workspace,
                user=user,
                new_name=summarize_title(request.message),
            )
            if renamed is None:
                return None
            await channel.write(
                RenameThreadAction(thread=ThreadRef(slug=renamed.slug, name=renamed.name))
            )
            return renamed
        except Exception:
            logger.exception("Thread auto-rename failed for %s", thread.slug)
            return None

    def telemetry_properties(self, request: ChatRequest) -> dict[str, Any]:
        cfg = self.settings
        return {
            "multiUserMode": cfg.multi_user_mode,
            "LLMSelection": cfg.llm_provider or "openai",
            "Embedder": cfg.embedding_engine or "inherit",
            "VectorDbSelection": cfg.vector_db or "lancedb",
            "multiModal": request.multimodal,
            "TTSSelection": cfg.tts_provider or "native",
            "LLMModel": get_model_tag(cfg),
        }

    def event_metadata(self, workspace: Workspace, thread: Thread | None) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "workspaceName": workspace.name,
            "workspaceSlug": workspace.slug,
            "chatModel": workspace.chat_model or "System Default",
        }
        if thread is not None:
            metadata["thread"] = thread.name
            metadata["threadSlug"] = thread.slug
        return metadata

    async def _record_sent_chat(
        self,
        request: ChatRequest,
        workspace: Workspace,
        user: User | None,
        thread: Thread | None,
    ) -> None:
        # Reply is already on the wire; failures here must not abort it.
        try:
            await self.telemetry.send_telemetry(
                SENT_CHAT_EVENT, self.telemetry_properties(request)
            )
        except Exception:
            logger.exception("Telemetry for %s failed", SENT_CHAT_EVENT)
        try:
            await self.event_logs.log_event(
                SENT_CHAT_EVENT,
                self.event_metadata(workspace, thread),
                user.id if user is not None else None,
            )
        except Exception:
            logger.exception("Event log for %s failed", SENT_CHAT_EVENT)
