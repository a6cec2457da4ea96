from .client import LLMClient, get_llm_client
from .config import SUPPORTED_PROVIDERS, LLMConfig

__all__ = [
    "LLMClient",
    "LLMConfig",
    "SUPPORTED_PROVIDERS",
    "get_llm_client",
]
