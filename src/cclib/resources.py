"""Declarative table of cloudControl API endpoints.

Every resource operation is one row: verb, path template and the record the
decoded body maps to. ``Session.invoke`` is the single generic invoker that
consumes the table, so adding an endpoint never needs a new method.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from string import Formatter
from typing import Any
from urllib.parse import quote, urlencode

from pydantic import BaseModel, TypeAdapter, ValidationError

from .exceptions import FieldMappingError
from .models import (
    Addon,
    Alias,
    Application,
    BillingAccount,
    Cronjob,
    Deployment,
    Key,
    Log,
    User,
    Worker,
)


@dataclass(frozen=True)
class Endpoint:
    """One API operation.

    Attributes:
        method: HTTP verb.
        path: Path template, e.g. ``/app/{app_name}/``. Trailing slashes are
            part of the contract with the server and are kept as written.
        model: Record type of the response, or None when the body is discarded.
        many: Whether the response is a list of records.
        query: Optional parameters sent as a query string when given.
    """

    method: str
    path: str
    model: type[BaseModel] | None = None
    many: bool = False
    query: tuple[str, ...] = ()

    @property
    def parameters(self) -> list[str]:
        """Names of the path template's placeholders, in order."""
        return [name for _, name, _, _ in Formatter().parse(self.path) if name]

    def resolve(self, **params: Any) -> str:
        """Fill in the path template.

        Identifiers are percent-encoded so that they cannot add path segments.
        ``@`` is left as is, so user names that are email addresses appear in
        the path unchanged.

        Raises:
            ValueError: If a placeholder has no value or an unknown parameter is given.
        """
        missing = [name for name in self.parameters if params.get(name) in (None, "")]
        if missing:
            raise ValueError(f"Missing path parameters for {self.path}: {', '.join(missing)}")

        unknown = set(params) - set(self.parameters) - set(self.query)
        if unknown:
            raise ValueError(f"Unknown parameters for {self.path}: {', '.join(sorted(unknown))}")

        path = self.path.format(
            **{name: quote(str(params[name]), safe="@") for name in self.parameters}
        )

        query = [(name, str(params[name])) for name in self.query if params.get(name) is not None]
        if query:
            path = f"{path}?{urlencode(query)}"
        return path


_APP = "/app/{app_name}/"
_DEP = _APP + "deployment/{dep_name}/"
_USER = "/user/{user_name}/"

ENDPOINTS: dict[str, Endpoint] = {
    # Applications
    "app.create": Endpoint("POST", "/app/", Application),
    "app.list": Endpoint("GET", "/app/", Application, many=True),
    "app.read": Endpoint("GET", _APP, Application),
    "app.delete": Endpoint("DELETE", _APP),
    # Deployments
    "deployment.create": Endpoint("POST", _APP + "deployment/", Deployment),
    "deployment.list": Endpoint("GET", _APP + "deployment/", Deployment, many=True),
    "deployment.read": Endpoint("GET", _DEP, Deployment),
    "deployment.update": Endpoint("PUT", _DEP, Deployment),
    "deployment.delete": Endpoint("DELETE", _DEP),
    # Aliases
    "alias.create": Endpoint("POST", _DEP + "alias/", Alias),
    "alias.list": Endpoint("GET", _DEP + "alias/", Alias, many=True),
    "alias.read": Endpoint("GET", _DEP + "alias/{alias_name}/", Alias),
    "alias.delete": Endpoint("DELETE", _DEP + "alias/{alias_name}/"),
    # Workers
    "worker.create": Endpoint("POST", _DEP + "worker/", Worker),
    "worker.list": Endpoint("GET", _DEP + "worker/", Worker, many=True),
    "worker.read": Endpoint("GET", _DEP + "worker/{worker_id}/", Worker),
    "worker.delete": Endpoint("DELETE", _DEP + "worker/{worker_id}/"),
    # Cronjobs
    "cronjob.create": Endpoint("POST", _DEP + "cron/", Cronjob),
    "cronjob.list": Endpoint("GET", _DEP + "cron/", Cronjob, many=True),
    "cronjob.read": Endpoint("GET", _DEP + "cron/{cronjob_id}/", Cronjob),
    "cronjob.delete": Endpoint("DELETE", _DEP + "cron/{cronjob_id}/"),
    # Add-ons
    "addon.available": Endpoint("GET", "/addon/", Addon, many=True),
    "addon.create": Endpoint("POST", _DEP + "addon/", Addon),
    "addon.list": Endpoint("GET", _DEP + "addon/", Addon, many=True),
    "addon.read": Endpoint("GET", _DEP + "addon/{addon_name}/", Addon),
    "addon.update": Endpoint("PUT", _DEP + "addon/{addon_name}/", Addon),
    "addon.delete": Endpoint("DELETE", _DEP + "addon/{addon_name}/"),
    # Application and deployment users
    "app_user.create": Endpoint("POST", _APP + "user/", User),
    "app_user.list": Endpoint("GET", _APP + "user/", User, many=True),
    "app_user.delete": Endpoint("DELETE", _APP + "user/{user_name}/"),
    "deployment_user.create": Endpoint("POST", _DEP + "user/", User),
    "deployment_user.list": Endpoint("GET", _DEP + "user/", User, many=True),
    "deployment_user.delete": Endpoint("DELETE", _DEP + "user/{user_name}/"),
    # Users
    "user.list": Endpoint("GET", "/user/", User, many=True),
    "user.read": Endpoint("GET", _USER, User),
    "user.update": Endpoint("PUT", _USER, User),
    "user.delete": Endpoint("DELETE", _USER),
    # Keys
    "key.create": Endpoint("POST", _USER + "key/", Key),
    "key.list": Endpoint("GET", _USER + "key/", Key, many=True),
    "key.read": Endpoint("GET", _USER + "key/{key_id}/", Key),
    "key.delete": Endpoint("DELETE", _USER + "key/{key_id}/"),
    # Logs
    "log.read": Endpoint("GET", _DEP + "log/{log_type}/", Log, many=True, query=("timestamp",)),
    # Billing accounts
    "billing.create": Endpoint("POST", _USER + "billing/{billing_name}/", BillingAccount),
    "billing.list": Endpoint("GET", _USER + "billing/", BillingAccount, many=True),
    "billing.update": Endpoint("PUT", _USER + "billing/{billing_name}/", BillingAccount),
}


def get_endpoint(name: str) -> Endpoint:
    """Look up an endpoint by its dotted name.

    Raises:
        KeyError: If no endpoint has that name.
    """
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise KeyError(f"Unknown endpoint: {name}") from None


def map_record(endpoint: Endpoint, tree: Any) -> Any:
    """Convert a decoded tree into the endpoint's record type.

    Returns:
        A record, a list of records, or None for endpoints without a model.

    Raises:
        FieldMappingError: If the tree does not fit the record type.
    """
    if endpoint.model is None:
        return None

    target: Any = list[endpoint.model] if endpoint.many else endpoint.model
    try:
        return TypeAdapter(target).validate_python(tree)
    except ValidationError as e:
        name = f"list[{endpoint.model.__name__}]" if endpoint.many else endpoint.model.__name__
        raise FieldMappingError(name, e) from e


def build_timestamp(dt: datetime) -> str:
    """Format ``dt`` as the ``timestamp`` value the log endpoint expects."""
    return f"{int(dt.timestamp())}.{dt.microsecond}"
