"""
Message dispatch.

Sends messages and runs the upload-then-send flows for images and
files. Every send folds the transport call, reply decoding and status
classification into one SentMessage.
"""
from pathlib import Path
from typing import Union, Callable, Awaitable

from ..api.caller import Caller
from ..api.response import ResponseEnvelope, raise_for_status
from ..exceptions import WebWxError, ParseError, UploadError
from ..logging import get_logger
from ..login.session import Session
from ..models import (
    BaseRequest,
    LoginInfo,
    MessageType,
    SendMessage,
    SentMessage,
    MessageResponse,
    UploadResponse,
    FileAppMessage,
)
from ..transport.protocols import ResponseBody


SendCall = Callable[[LoginInfo, BaseRequest, SendMessage], Awaitable[ResponseBody]]


class MessageDispatcher:
    """
    Sends messages for one session.

    A failed send raises the classified error with the partially built
    SentMessage attached as error.sent_message.
    """

    def __init__(self, caller: Caller, session: Session):
        """
        Initialize dispatcher.

        Args:
            caller: Vendor operations (its transport performs the sends)
            session: Session to send from
        """
        self._caller = caller
        self._transport = caller.transport
        self._session = session
        self._logger = get_logger('wxwebpy.messages')

    @property
    def session(self) -> Session:
        return self._session

    async def send(self, message: SendMessage) -> SentMessage:
        """
        Send a message.

        Returns:
            SentMessage carrying the server's message id

        Raises:
            TransportError: On network failure
            ParseError: If the reply could not be decoded
            RemoteError: If the server refused the message
            ParseError: If the reply carries no message id
        """
        return await self._dispatch(message, self._transport.send_message)

    async def send_text(self, to_user_name: str, content: str) -> SentMessage:
        message = SendMessage.text(self._session.user.user_name, to_user_name, content)
        return await self.send(message)

    async def send_app(self, message: SendMessage) -> SentMessage:
        """Send an app message (its content is an <appmsg> document)."""
        return await self._dispatch(message, self._transport.send_app_message)

    async def upload_media(
        self,
        file_path: Union[str, Path],
        to_user_name: str
    ) -> UploadResponse:
        """
        Upload a file for a later image or file message.

        Returns:
            Upload reply with a non-empty media id

        Raises:
            FileNotFoundError: If the path is not a file
            RemoteError: If the server refused the upload
            UploadError: If the server reported success without a media id
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")

        session = self._session
        envelope = await ResponseEnvelope.capture(
            self._transport.upload_media(
                session.login_info,
                session.base_request,
                path,
                session.user.user_name,
                to_user_name
            )
        )
        response = await envelope.decode_json(UploadResponse)
        raise_for_status(response)

        if not response.media_id:
            raise UploadError("upload failed: empty media id", response=response)

        self._logger.debug(f"Uploaded {path.name} as {response.media_id}")
        return response

    async def send_image(self, file_path: Union[str, Path], to_user_name: str) -> SentMessage:
        """Upload an image and send it."""
        upload = await self.upload_media(file_path, to_user_name)
        message = SendMessage.media(
            MessageType.IMAGE,
            self._session.user.user_name,
            to_user_name,
            upload.media_id
        )
        return await self._dispatch(message, self._transport.send_image_message)

    async def send_file(self, file_path: Union[str, Path], to_user_name: str) -> SentMessage:
        """Upload a file and send it as a file app message."""
        upload = await self.upload_media(file_path, to_user_name)
        content = FileAppMessage.for_file(Path(file_path), upload.media_id).to_xml()
        message = SendMessage(
            MessageType.APP,
            content,
            self._session.user.user_name,
            to_user_name,
            media_id=upload.media_id
        )
        return await self.send_app(message)

    async def revoke(self, sent: SentMessage) -> None:
        session = self._session
        await self._caller.revoke_message(session.login_info, session.base_request, sent)

    async def _dispatch(self, message: SendMessage, send: SendCall) -> SentMessage:
        session = self._session
        sent = SentMessage(message=message)

        envelope = await ResponseEnvelope.capture(
            send(session.login_info, session.base_request, message)
        )
        try:
            response = await envelope.decode_json(MessageResponse)
            raise_for_status(response)
        except WebWxError as e:
            e.sent_message = sent
            raise

        sent.local_id = response.local_id or message.local_id
        if not response.msg_id:
            self._logger.warning(f"Message to {message.to_user_name} accepted without a message id")
            error = ParseError("message id missing")
            error.sent_message = sent
            raise error

        sent.msg_id = response.msg_id
        return sent
