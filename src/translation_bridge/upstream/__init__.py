"""Translation engine transport."""

from translation_bridge.upstream.client import UpstreamClient, extract_error_message

__all__ = ["UpstreamClient", "extract_error_message"]
