"""Default chat engine: stream a single LLM reply into the session channel."""

from __future__ import annotations

import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from api.schemas.responses import TextResponseEvent
from config import Settings, settings as default_settings
from core.channel import ResponseChannel
from core.exceptions import EngineError
from core.models import AttachmentRef, ChatMode, Thread, User, Workspace
from memory.registry import InMemoryRegistry

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM = (
    "Given the following conversation and a follow up question, reply with an answer "
    "to the current question the user is asking. Follow the user's instructions as needed."
)
DEFAULT_QUERY_REFUSAL = "There is no relevant information in this workspace to answer your query."


def _user_content(message: str, attachments: list[AttachmentRef]) -> str | list[dict]:
    images = [a for a in attachments if a.mime.startswith("image/")]
    if not images:
        return message
    parts: list[dict] = [{"type": "text", "text": message}]
    for image in images:
        parts.append({"type": "image_url", "image_url": {"url": image.content_string}})
    return parts


class LangChainChatEngine:
    """Streams ``textResponseChunk`` events from a LangChain chat model and stores the chat."""

    def __init__(
        self,
        store: InMemoryRegistry,
        llm: BaseChatModel | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or default_settings
        self._llm = llm

    def _get_llm(self, workspace: Workspace) -> BaseChatModel:
        if self._llm is not None:
            return self._llm
        return ChatOpenAI(
            model=workspace.chat_model or self.settings.openai_model,
            api_key=self.settings.openai_api_key,
            temperature=self.settings.engine_temperature,
        )

    def build_messages(
        self,
        workspace: Workspace,
        message: str,
        user: User | None,
        thread: Thread | None,
        attachments: list[AttachmentRef],
    ) -> list[BaseMessage]:
        messages: list[BaseMessage] = [
            SystemMessage(content=workspace.system_prompt or DEFAULT_SYSTEM)
        ]
        for chat in self.store.history(
            workspace, thread=thread, user=user, limit=self.settings.history_limit
        ):
            messages.append(HumanMessage(content=chat.prompt))
            messages.append(AIMessage(content=chat.response))
        messages.append(HumanMessage(content=_user_content(message, attachments)))
        return messages

    async def stream_chat(
        self,
        *,
        channel: ResponseChannel,
        workspace: Workspace,
        message: str,
        chat_mode: ChatMode,
        user: User | None,
        thread: Thread | None,
        attachments: list[AttachmentRef],
    ) -> None:
        if chat_mode == ChatMode.QUERY and not attachments:
            # Query mode answers only from workspace context; none is available here.
            refusal = workspace.query_refusal_response or DEFAULT_QUERY_REFUSAL
            await channel.write(
                TextResponseEvent(type="textResponse", text_response=refusal, close=True)
            )
            self.store.record_chat(workspace, message, refusal, user=user, thread=thread)
            return

        llm = self._get_llm(workspace)
        messages = self.build_messages(workspace, message, user, thread, attachments)
        full_text = ""
        try:
            async for chunk in llm.astream(messages):
                if channel.disconnected:
                    logger.info("Client left workspace %s mid-stream", workspace.slug)
                    break
                text = chunk.content if isinstance(chunk.content, str) else ""
                if not text:
                    continue
                full_text += text
                await channel.write(TextResponseEvent(text_response=text))
        except Exception as e:
            raise EngineError(str(e)) from e

        if channel.disconnected:
            # Abandoned turns are not stored: no quota charge, no rename.
            return
        await channel.write(TextResponseEvent(text_response="", close=True))
        self.store.record_chat(workspace, message, full_text, user=user, thread=thread)
