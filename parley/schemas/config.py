"""Configuration schemas loaded from defaults.toml."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_MESSAGE = (
    "Sorry, I am unable to provide a response at this time. "
    "Try again, or contact support for assistance."
)


class ModelConfig(BaseModel):
    """Connection settings for the upstream model.

    Passed to the provider at construction. Nothing here is process-wide.
    """

    model: str = Field(description="LiteLLM model identifier")
    api_key_env: str = Field(description="Environment variable holding the API key")
    api_base: str = Field(default="", description="Custom API base URL (empty = provider default)")
    timeout: int = Field(default=300, gt=0, description="Timeout in seconds for one turn")


class AssistantSettings(BaseModel):
    """Product-facing settings for prompts and the final presentation."""

    product_name: str = Field(default="Parley", description="Name used in the system prompt")
    support_url: str = Field(default="https://example.com/support")
    support_label: str = Field(default="Get support")
    demo_url: str = Field(default="https://example.com/demo")
    demo_label: str = Field(default="Schedule a demo")
    fallback_message: str = Field(
        default=DEFAULT_FALLBACK_MESSAGE,
        description="Shown when the model produced no content",
    )


class AssistantConfig(BaseModel):
    """Top-level configuration."""

    model: ModelConfig
    assistant: AssistantSettings = Field(default_factory=AssistantSettings)
