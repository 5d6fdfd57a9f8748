"""Parley provider layer.

Every model call goes through a FragmentProducer. LiteLLMProvider talks
to real models; ScriptedProducer replays a fixed stream.
"""

from parley.providers.base import FragmentProducer
from parley.providers.decoder import PartialJSONDecoder
from parley.providers.litellm_provider import LiteLLMProvider
from parley.providers.scripted import DEMO_SCRIPT, ScriptedProducer

__all__ = [
    "DEMO_SCRIPT",
    "FragmentProducer",
    "LiteLLMProvider",
    "PartialJSONDecoder",
    "ScriptedProducer",
]
