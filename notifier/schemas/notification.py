"""Pydantic schemas for notification messages and webhook configuration."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

# camelCase on the wire (config files, tool arguments), snake_case in code
_CAMEL = {"alias_generator": to_camel, "populate_by_name": True, "extra": "ignore"}


class NotificationAction(BaseModel):
    action: Literal["view", "http"] = Field(..., description="view opens a URL, http fires a request")
    label: str
    url: str
    method: Optional[Literal["GET", "POST", "PUT", "DELETE"]] = None
    headers: Optional[dict[str, str]] = None
    body: Optional[str] = None
    clear: bool = Field(False, description="Ask the provider to clear the notification afterwards")

    model_config = _CAMEL


class NotificationMessage(BaseModel):
    title: Optional[str] = None
    body: str
    link: Optional[str] = None
    image_url: Optional[str] = Field(None, description="Remote image URL")
    image: Optional[str] = Field(None, description="Local image path, takes precedence over image_url")
    priority: Optional[int] = Field(None, description="1-5, 5 is the highest")
    attachments: list[str] = Field(default_factory=list)
    actions: list[NotificationAction] = Field(default_factory=list)
    template: Optional[str] = Field(None, description="Built-in template name")
    template_data: dict[str, Any] = Field(default_factory=dict)

    model_config = _CAMEL


class TemplateOverrides(BaseModel):
    title: Optional[str] = None
    message: Optional[str] = None


class WebhookConfig(BaseModel):
    url: str = ""
    type: str = ""
    name: Optional[str] = None
    token: Optional[str] = None
    default_priority: Optional[int] = None
    templates: Optional[TemplateOverrides] = None
    default_actions: list[NotificationAction] = Field(default_factory=list)
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    markdown: bool = False

    model_config = _CAMEL


class ImgurConfig(BaseModel):
    client_id: Optional[str] = Field(None, description="Anonymous uploads when unset")
    api_url: Optional[str] = None

    model_config = _CAMEL


class AskConfig(BaseModel):
    enabled: bool = False
    server_url: str = "http://localhost"
    host: str = "127.0.0.1"
    port: int = 4591

    model_config = _CAMEL


class NotifierConfig(BaseModel):
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    imgur: Optional[ImgurConfig] = None
    ask: AskConfig = Field(default_factory=AskConfig)
    request_timeout: Optional[float] = None
    block_private_networks: bool = False

    model_config = _CAMEL
