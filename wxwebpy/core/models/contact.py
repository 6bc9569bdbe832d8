"""Contact models."""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from .base import BaseResponse


@dataclass
class User:
    """
    A contact, group or group member.

    Attributes:
        user_name: Session-scoped id, '@...' for users and '@@...' for groups
        nick_name: Display name chosen by the user
        remark_name: Name given by the logged in account
        sex: 0 unknown, 1 male, 2 female
        contact_flag: Relationship bit flags
        member_count: Number of members (groups only)
        member_list: Members (groups only, filled by batch get contact)
        raw: Original JSON object
    """
    user_name: str
    nick_name: str = ''
    remark_name: str = ''
    display_name: str = ''
    head_img_url: str = ''
    signature: str = ''
    sex: int = 0
    uin: int = 0
    contact_flag: int = 0
    verify_flag: int = 0
    member_count: int = 0
    member_list: List['User'] = field(default_factory=list)
    encry_chat_room_id: str = ''
    province: str = ''
    city: str = ''
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_group(self) -> bool:
        return self.user_name.startswith('@@')

    @property
    def name(self) -> str:
        """Best name to show for this contact."""
        return self.remark_name or self.display_name or self.nick_name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'User':
        return cls(
            user_name=data.get('UserName', ''),
            nick_name=data.get('NickName', ''),
            remark_name=data.get('RemarkName', ''),
            display_name=data.get('DisplayName', ''),
            head_img_url=data.get('HeadImgUrl', ''),
            signature=data.get('Signature', ''),
            sex=int(data.get('Sex', 0) or 0),
            uin=int(data.get('Uin', 0) or 0),
            contact_flag=int(data.get('ContactFlag', 0) or 0),
            verify_flag=int(data.get('VerifyFlag', 0) or 0),
            member_count=int(data.get('MemberCount', 0) or 0),
            member_list=[cls.from_dict(m) for m in data.get('MemberList') or []],
            encry_chat_room_id=data.get('EncryChatRoomId', ''),
            province=data.get('Province', ''),
            city=data.get('City', ''),
            raw=data
        )


@dataclass(frozen=True)
class ContactListResponse:
    """Reply of the get-contact endpoint."""
    base_response: BaseResponse
    member_list: List[User]
    seq: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContactListResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            member_list=[User.from_dict(m) for m in data.get('MemberList') or []],
            seq=int(data.get('Seq', 0) or 0)
        )


@dataclass(frozen=True)
class BatchContactResponse:
    """Reply of the batch-get-contact endpoint."""
    base_response: BaseResponse
    contact_list: List[User]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BatchContactResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            contact_list=[User.from_dict(m) for m in data.get('ContactList') or []]
        )


@dataclass(frozen=True)
class RecommendInfo:
    """Friend request carried by a verify message."""
    user_name: str
    ticket: str
    nick_name: str = ''
    content: str = ''
    scene: int = 0
    op_code: int = 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'RecommendInfo':
        data = data or {}
        return cls(
            user_name=data.get('UserName', ''),
            ticket=data.get('Ticket', ''),
            nick_name=data.get('NickName', ''),
            content=data.get('Content', ''),
            scene=int(data.get('Scene', 0) or 0),
            op_code=int(data.get('OpCode', 0) or 0)
        )
