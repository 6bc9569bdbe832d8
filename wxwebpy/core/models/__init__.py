"""Data models for requests and replies."""
from .base import BaseResponse, BaseRequest, StatusReply, SyncKey, SyncKeyItem, generate_device_id
from .contact import User, ContactListResponse, BatchContactResponse, RecommendInfo
from .login import LoginStatus, CheckLoginResponse, WechatDomain, LoginInfo, WebInitResponse
from .message import (
    MessageType,
    AppMessageType,
    SendMessage,
    SentMessage,
    MessageResponse,
    UploadResponse,
    FileAppMessage,
    Message,
    WebSyncResponse,
)
from .sync import Selector, SyncCheckResponse

__all__ = [
    'BaseResponse',
    'BaseRequest',
    'StatusReply',
    'SyncKey',
    'SyncKeyItem',
    'generate_device_id',
    'User',
    'ContactListResponse',
    'BatchContactResponse',
    'RecommendInfo',
    'LoginStatus',
    'CheckLoginResponse',
    'WechatDomain',
    'LoginInfo',
    'WebInitResponse',
    'MessageType',
    'AppMessageType',
    'SendMessage',
    'SentMessage',
    'MessageResponse',
    'UploadResponse',
    'FileAppMessage',
    'Message',
    'WebSyncResponse',
    'Selector',
    'SyncCheckResponse',
]
