"""
Message models.

Uses dataclasses for outgoing messages, server replies and the
incoming messages delivered by web sync.
"""
import time
import random
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Dict, Any, List, Optional

from lxml import etree

from .base import BaseResponse, SyncKey
from .contact import User, RecommendInfo


class MessageType(IntEnum):
    """Message type codes."""
    TEXT = 1
    IMAGE = 3
    APP = 6
    VOICE = 34
    VERIFY = 37
    VIDEO = 43
    EMOTICON = 47
    SYSTEM = 10000
    RECALLED = 10002


class AppMessageType(IntEnum):
    """Types carried inside an <appmsg> body."""
    FILE = 6


def new_client_msg_id() -> str:
    """Local message ids are a millisecond timestamp with a random tail."""
    return f"{int(time.time() * 1000)}{random.randint(1000, 9999)}"


@dataclass
class SendMessage:
    """
    A message about to be sent.

    Attributes:
        type: Message type
        content: Text, or the <appmsg> XML for app messages
        from_user_name: Sender user name (the logged in account)
        to_user_name: Receiver user name
        media_id: Media id returned by an upload (image/app messages)
        local_id: Client side id
        client_msg_id: Client side id, same as local_id
    """
    type: MessageType
    content: str
    from_user_name: str
    to_user_name: str
    media_id: str = ''
    local_id: str = field(default_factory=new_client_msg_id)
    client_msg_id: str = ''

    def __post_init__(self):
        if not self.client_msg_id:
            self.client_msg_id = self.local_id

    @classmethod
    def text(cls, from_user_name: str, to_user_name: str, content: str) -> 'SendMessage':
        return cls(MessageType.TEXT, content, from_user_name, to_user_name)

    @classmethod
    def media(cls, type: MessageType, from_user_name: str, to_user_name: str,
              media_id: str) -> 'SendMessage':
        return cls(type, '', from_user_name, to_user_name, media_id=media_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Msg JSON object."""
        return {
            'Type': int(self.type),
            'Content': self.content,
            'FromUserName': self.from_user_name,
            'ToUserName': self.to_user_name,
            'LocalID': self.local_id,
            'ClientMsgId': self.client_msg_id,
            'MediaId': self.media_id,
        }


@dataclass
class SentMessage:
    """
    A message after submission.

    msg_id is only set once the server accepted the message; a failed
    send leaves it empty.
    """
    message: SendMessage
    msg_id: str = ''
    local_id: str = ''

    @property
    def is_sent(self) -> bool:
        return bool(self.msg_id)

    @property
    def to_user_name(self) -> str:
        return self.message.to_user_name

    @property
    def client_msg_id(self) -> str:
        return self.message.client_msg_id


@dataclass(frozen=True)
class MessageResponse:
    """Reply of the send-message endpoints."""
    base_response: BaseResponse
    msg_id: str = ''
    local_id: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MessageResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            msg_id=str(data.get('MsgID', '') or ''),
            local_id=str(data.get('LocalID', '') or '')
        )


@dataclass(frozen=True)
class UploadResponse:
    """Reply of the media upload endpoint."""
    base_response: BaseResponse
    media_id: str = ''
    start_pos: int = 0
    cdn_thumb_img_height: int = 0
    cdn_thumb_img_width: int = 0
    encry_file_name: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            media_id=data.get('MediaId', '') or '',
            start_pos=int(data.get('StartPos', 0) or 0),
            cdn_thumb_img_height=int(data.get('CDNThumbImgHeight', 0) or 0),
            cdn_thumb_img_width=int(data.get('CDNThumbImgWidth', 0) or 0),
            encry_file_name=data.get('EncryFileName', '') or ''
        )


@dataclass(frozen=True)
class FileAppMessage:
    """<appmsg> body announcing an uploaded file."""
    title: str
    total_len: int
    attach_id: str
    file_ext: str = ''
    app_id: str = 'wxeb7ec651dd0aefa9'

    @classmethod
    def for_file(cls, path: Path, media_id: str) -> 'FileAppMessage':
        path = Path(path)
        return cls(
            title=path.name,
            total_len=path.stat().st_size,
            attach_id=media_id,
            file_ext=path.suffix.lstrip('.')
        )

    def to_xml(self) -> str:
        root = etree.Element('appmsg', appid=self.app_id, sdkver='')
        etree.SubElement(root, 'title').text = self.title
        etree.SubElement(root, 'des').text = ''
        etree.SubElement(root, 'action').text = ''
        etree.SubElement(root, 'type').text = str(int(AppMessageType.FILE))
        etree.SubElement(root, 'content').text = ''
        etree.SubElement(root, 'url').text = ''
        etree.SubElement(root, 'lowurl').text = ''
        attach = etree.SubElement(root, 'appattach')
        etree.SubElement(attach, 'totallen').text = str(self.total_len)
        etree.SubElement(attach, 'attachid').text = self.attach_id
        etree.SubElement(attach, 'fileext').text = self.file_ext
        etree.SubElement(root, 'extinfo').text = ''
        return etree.tostring(root, encoding='unicode')


@dataclass
class Message:
    """An incoming message from web sync."""
    msg_id: str
    msg_type: int
    from_user_name: str
    to_user_name: str
    content: str = ''
    create_time: int = 0
    media_id: str = ''
    file_name: str = ''
    recommend_info: Optional[RecommendInfo] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_group(self) -> bool:
        return self.from_user_name.startswith('@@') or self.to_user_name.startswith('@@')

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Message':
        msg_type = int(data.get('MsgType', 0) or 0)
        recommend = None
        if msg_type == MessageType.VERIFY:
            recommend = RecommendInfo.from_dict(data.get('RecommendInfo'))
        return cls(
            msg_id=str(data.get('MsgId', '')),
            msg_type=msg_type,
            from_user_name=data.get('FromUserName', ''),
            to_user_name=data.get('ToUserName', ''),
            content=data.get('Content', ''),
            create_time=int(data.get('CreateTime', 0) or 0),
            media_id=data.get('MediaId', ''),
            file_name=data.get('FileName', ''),
            recommend_info=recommend,
            raw=data
        )


@dataclass(frozen=True)
class WebSyncResponse:
    """Reply of the web sync endpoint."""
    base_response: BaseResponse
    add_msg_list: List[Message] = field(default_factory=list)
    mod_contact_list: List[User] = field(default_factory=list)
    del_contact_list: List[User] = field(default_factory=list)
    sync_key: SyncKey = field(default_factory=SyncKey)
    sync_check_key: SyncKey = field(default_factory=SyncKey)
    continue_flag: int = 0
    skey: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WebSyncResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            add_msg_list=[Message.from_dict(m) for m in data.get('AddMsgList') or []],
            mod_contact_list=[User.from_dict(c) for c in data.get('ModContactList') or []],
            del_contact_list=[User.from_dict(c) for c in data.get('DelContactList') or []],
            sync_key=SyncKey.from_dict(data.get('SyncKey')),
            sync_check_key=SyncKey.from_dict(data.get('SyncCheckKey')),
            continue_flag=int(data.get('ContinueFlag', 0) or 0),
            skey=data.get('SKey', '') or ''
        )
