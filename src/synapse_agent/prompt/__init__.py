"""Prompt rendering and parsing.

This subpackage provides:
- parse_prompt: rendered template text to Messages
- encode_payload / decode_payload: the base64(JSON) block attribute codec
- TemplateRenderer and the Jinja2-backed JinjaTemplateRenderer
"""

from synapse_agent.prompt.parser import decode_payload, encode_payload, parse_prompt
from synapse_agent.prompt.renderer import JinjaTemplateRenderer, TemplateRenderer

__all__ = [
    "JinjaTemplateRenderer",
    "TemplateRenderer",
    "decode_payload",
    "encode_payload",
    "parse_prompt",
]
