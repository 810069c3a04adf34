"""Python client for the cloudControl PaaS API.

The library wraps the API's resource endpoints behind one authenticated
session that acquires a token, attaches it to every call and decodes plain
or gzip-compressed JSON bodies.

Basic Usage:
    ```python
    from cclib import Session

    # Async usage
    async with Session() as session:
        await session.authenticate("name@example.com", "secretpassword")
        apps = await session.get("/app/")

    # Sync usage
    from cclib import SessionSync

    with SessionSync() as session:
        session.authenticate("name@example.com", "secretpassword")
        app = session.invoke("app.read", app_name="myapp")
    ```

Using a stored token:
    ```python
    from cclib import Session, Token

    session = Session(token=Token.read("token.json"))
    ```
"""

from ._sync import SessionSync
from .config import USER_AGENT, VERSION, Config
from .credentials import read_credentials_file
from .decoding import decode_content
from .exceptions import (
    AuthorizationRequired,
    CancelledError,
    CclibError,
    CredentialsFileError,
    DecodeError,
    FieldMappingError,
    HTTPStatusError,
    TimeoutError,
    TransportError,
)
from .models import (
    Addon,
    AddonOption,
    Alias,
    Application,
    ApplicationType,
    BilledAddon,
    BillingAccount,
    Boxes,
    Cronjob,
    Deployment,
    Key,
    Log,
    Owner,
    Stack,
    SupportPlan,
    User,
    Worker,
)
from .resources import ENDPOINTS, Endpoint, build_timestamp, get_endpoint, map_record
from .session import Session
from .token import Token
from .transport import Transport

__version__ = VERSION

__all__ = [
    # Version
    "__version__",
    "USER_AGENT",
    # Clients
    "Session",
    "SessionSync",
    "Transport",
    "Config",
    "Token",
    # Helpers
    "decode_content",
    "read_credentials_file",
    # Resources
    "ENDPOINTS",
    "Endpoint",
    "get_endpoint",
    "map_record",
    "build_timestamp",
    # Models
    "Addon",
    "AddonOption",
    "Alias",
    "Application",
    "ApplicationType",
    "BilledAddon",
    "BillingAccount",
    "Boxes",
    "Cronjob",
    "Deployment",
    "Key",
    "Log",
    "Owner",
    "Stack",
    "SupportPlan",
    "User",
    "Worker",
    # Exceptions
    "CclibError",
    "AuthorizationRequired",
    "TransportError",
    "TimeoutError",
    "HTTPStatusError",
    "DecodeError",
    "FieldMappingError",
    "CredentialsFileError",
    "CancelledError",
]
