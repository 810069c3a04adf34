"""Pydantic records for cloudControl API resources.

These map the decoded JSON tree onto typed objects. Unknown keys are
ignored; missing keys fall back to empty values, as the API omits fields
that do not apply (e.g. ``buildpack_url`` for non-custom applications).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """Base for all resource records."""

    model_config = ConfigDict(populate_by_name=True)


class ApplicationType(Record):
    """Application runtime (python, ruby, java, php, nodejs or custom)."""

    name: str = ""


class Owner(Record):
    """Owner of an application."""

    username: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    is_active: bool = False


class User(Record):
    """A user, or a user's membership in an application or deployment."""

    username: str = ""
    email: str = ""
    role: str = Field(default="", description="owner, admin or readonly")


class Stack(Record):
    """Stack version, e.g. luigi or pinky."""

    name: str = ""


class BilledAddon(Record):
    """Billing of a single add-on."""

    name: str = Field(default="", alias="addon")
    hours: int = 0
    costs: float = 0
    until: float = 0


class Boxes(Record):
    """Billing of a deployment's boxes."""

    boxes: int = 0
    costs: float = 0
    free_boxes: int = 0
    until: float = 0


class SupportPlan(Record):
    name: str = ""
    thirty_days_price: str = ""
    price_in_bill_percentage: str = ""


class BillingAccount(Record):
    default: bool = False
    email: str = ""
    postal_code: str = ""
    title: str = ""
    name: str = ""
    first_name: str = ""
    second_name: str = ""
    user: User = Field(default_factory=User)
    company: str = ""
    country: str = ""
    support_plan: SupportPlan = Field(default_factory=SupportPlan)


class Deployment(Record):
    """A deployment of an application."""

    name: str = ""
    id: str = Field(default="", alias="dep_id", description="depxxxxxxxx")
    default_subdomain: str = ""
    users: list[User] = Field(default_factory=list)
    stack: Stack = Field(default_factory=Stack)
    billed_addons: list[BilledAddon] = Field(default_factory=list)
    version: str = ""
    is_default: bool = False
    billed_boxes: Boxes = Field(default_factory=Boxes, alias="boxes")
    billing_account: BillingAccount | None = None
    state: str = ""
    containers: int = Field(default=0, alias="min_boxes")
    size: int = Field(default=0, alias="max_boxes", description="1 -> 128MB, 8 -> 1024MB")


class Application(Record):
    name: str
    type: ApplicationType = Field(default_factory=ApplicationType)
    owner: Owner | None = None
    buildpack_url: str = ""
    users: list[User] = Field(default_factory=list)
    deployments: list[Deployment] = Field(default_factory=list)


class Alias(Record):
    """A custom domain alias of a deployment."""

    name: str
    verification_code: str = ""
    verification_errors: int = 0
    is_default: bool = False
    is_verified: bool = False


class Worker(Record):
    id: str = Field(alias="wrk_id")
    command: str = ""
    params: str = ""
    size: int | None = None


class Cronjob(Record):
    id: str = Field(alias="job_id")
    url: str = ""


class AddonOption(Record):
    name: str = Field(default="", description="ADDON_NAME.OPTION_NAME")


class Addon(Record):
    name: str = ""
    option: AddonOption = Field(default_factory=AddonOption, alias="addon_option")
    settings: dict[str, Any] | None = None


class Key(Record):
    """A user's public SSH key."""

    id: str = Field(alias="key_id")
    key: str = ""


class Log(Record):
    """A single log entry (error, deploy, access or worker)."""

    type: str = ""
    message: str = ""
    time: float = 0
