"""
Shared request/response models.

Field names on the wire are the server's PascalCase names; the
dataclasses use snake_case and convert in from_dict/to_dict.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional


@dataclass(frozen=True)
class BaseResponse:
    """
    Status object embedded in nearly every JSON reply.

    Attributes:
        ret: Status code, 0 means success (ErrCode)
        err_msg: Human readable message, often empty (ErrMsg)
    """
    ret: int = 0
    err_msg: str = ''

    def ok(self) -> bool:
        """Returns True if the server reported success."""
        return self.ret == 0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'BaseResponse':
        """Create from the BaseResponse JSON object."""
        data = data or {}
        return cls(
            ret=int(data.get('Ret', 0)),
            err_msg=data.get('ErrMsg', '') or ''
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'Ret': self.ret, 'ErrMsg': self.err_msg}


@dataclass(frozen=True)
class StatusReply:
    """Reply that carries nothing but a BaseResponse."""
    base_response: BaseResponse = field(default_factory=BaseResponse)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StatusReply':
        """
        Create from a status-only reply.

        Raises:
            ValueError: If the reply has no BaseResponse object
        """
        if not isinstance(data.get('BaseResponse'), dict):
            raise ValueError("no BaseResponse object")
        return cls(base_response=BaseResponse.from_dict(data.get('BaseResponse')))


def generate_device_id() -> str:
    """Device ids are 'e' followed by 15 random digits."""
    return 'e' + ''.join(random.choice('0123456789') for _ in range(15))


@dataclass(frozen=True)
class BaseRequest:
    """
    Identity block sent with every authenticated request.

    Attributes:
        uin: Account number (wxuin)
        sid: Session id (wxsid)
        skey: Session key
        device_id: Client device id
    """
    uin: int
    sid: str
    skey: str
    device_id: str = field(default_factory=generate_device_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Uin': self.uin,
            'Sid': self.sid,
            'Skey': self.skey,
            'DeviceID': self.device_id,
        }

    def with_skey(self, skey: str) -> 'BaseRequest':
        """Copy with a refreshed skey (web init and web sync may rotate it)."""
        return BaseRequest(uin=self.uin, sid=self.sid, skey=skey, device_id=self.device_id)


@dataclass(frozen=True)
class SyncKeyItem:
    key: int
    val: int


@dataclass(frozen=True)
class SyncKey:
    """
    Sync position returned by web init and web sync.

    Example:
        >>> SyncKey.from_dict({'Count': 2, 'List': [{'Key': 1, 'Val': 10}, {'Key': 2, 'Val': 20}]}).format()
        '1_10|2_20'
    """
    items: List[SyncKeyItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def format(self) -> str:
        """Format as the synccheck query parameter."""
        return '|'.join(f"{item.key}_{item.val}" for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SyncKey':
        data = data or {}
        return cls(items=[
            SyncKeyItem(key=int(item.get('Key', 0)), val=int(item.get('Val', 0)))
            for item in data.get('List') or []
        ])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Count': self.count,
            'List': [{'Key': item.key, 'Val': item.val} for item in self.items],
        }
