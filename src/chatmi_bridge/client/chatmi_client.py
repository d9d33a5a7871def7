# chatmi_bridge/client/chatmi_client.py
import logging

import httpx

from chatmi_bridge.config import default
from chatmi_bridge.errors import NoAnswerError, UpstreamHTTPError
from chatmi_bridge.schemas import ChatmiChat, ChatmiRequest, ChatmiResponse


class ChatmiClient:
    """
    Client for the Chatmi bot webhook.
    Sends one `new_message` event per call and returns the bot's first reply.
    """
    def __init__(
        self,
        endpoint: str = default.CHATMI_ENDPOINT,
        chat_id: str = default.CHATMI_CHAT_ID,
        timeout: float | None = default.CHATMI_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint
        self.chat_id = chat_id
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.logger = logging.getLogger("chatmi_bridge.chatmi")

    def build_payload(self, text: str) -> dict:
        return ChatmiRequest(chat=ChatmiChat(id=self.chat_id), text=text).model_dump()

    async def send_message(self, text: str) -> str:
        """
        Post `text` to Chatmi and return the text of the first message it answers with.
        Raises UpstreamHTTPError on a non-2xx status and NoAnswerError when nothing came back.
        """
        payload = self.build_payload(text)
        self.logger.debug(f"POST {self.endpoint}")
        resp = await self.client.post(
            self.endpoint,
            json=payload,
            headers={"Content-Type": "application/json"},
        )

        if not resp.is_success:
            self.logger.error(f"Chatmi returned HTTP {resp.status_code}")
            raise UpstreamHTTPError(resp.status_code, resp.reason_phrase)

        data = ChatmiResponse.model_validate(resp.json())
        if data.has_answer and data.messages:
            return data.messages[0].text

        self.logger.warning("Chatmi produced no answer")
        raise NoAnswerError()

    async def aclose(self):
        await self.client.aclose()
