"""Server status codes and exceptions."""
from typing import Dict, Any

from ...exceptions import WebWxError


class RetCodes:
    """Status codes returned in BaseResponse.Ret."""

    SUCCESS = 0
    TICKET_ERROR = -14
    LOGIC_ERROR = -2
    SYS_ERROR = -1
    PARAM_ERROR = 1
    FAILED_LOGIN_WARN = 1100
    FAILED_LOGIN_CHECK = 1101
    COOKIE_INVALID = 1102
    LOGIN_ENV_ABNORMALITY = 1203
    OPT_TOO_OFTEN = 1205

    ERROR_CODES: Dict[int, str] = {
        -14: 'ticket error',
        -2: 'logic error',
        -1: 'system error',
        1: 'param error',
        1100: 'failed login warn: logged out from the phone',
        1101: 'failed login check: logged in from another device',
        1102: 'cookie invalid',
        1203: 'login environment abnormal',
        1205: 'operation too frequent, try again later',
    }

    @classmethod
    def get_message(cls, code: int) -> str:
        """Gets error message for status code."""
        return cls.ERROR_CODES.get(code, f"Unknown error: {code}")


class RemoteError(WebWxError):
    """
    Server answered with a non-zero status code.

    The code is authoritative whatever the HTTP status was.
    """

    def __init__(self, code: int, message: str = ''):
        self.code = code
        self.message = message or RetCodes.get_message(code)
        super().__init__(f"{self.message} (ret={code})")


class LoginRejectedError(RemoteError):
    """Login info document came back with a not-ok status."""

    def __init__(self, login_info: Any):
        self.login_info = login_info
        super().__init__(login_info.ret, login_info.message)


class SessionTerminatedError(RemoteError):
    """
    Sync check returned a non-zero retcode.

    The session is over and the handshake has to start again.
    """

    restart_handshake = True

    def __init__(self, retcode: str):
        self.retcode = retcode
        try:
            code = int(retcode)
        except ValueError:
            code = -1
        super().__init__(code, f"session terminated, retcode {retcode}")
