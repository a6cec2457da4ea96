from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from django.conf import settings

SUPPORTED_PROVIDERS = ("gemini", "openai")
CREDENTIAL_ENV = {
    "gemini": "GEMINI_API_KEY (or GOOGLE_API_KEY)",
    "openai": "OPENAI_API_KEY",
}


@dataclass
class LLMConfig:
    provider: str
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    temperature: float = 0.2
    # Retry nội bộ của SDK; mặc định 0 vì service đã tự retry theo ngày
    max_retries: int = 0

    @staticmethod
    def from_settings() -> "LLMConfig":
        return LLMConfig(
            provider=(getattr(settings, "LLM_PROVIDER", None) or "gemini").lower(),
            openai_api_key=getattr(settings, "OPENAI_API_KEY", None),
            openai_model=getattr(settings, "OPENAI_MODEL", None) or "gpt-4o-mini",
            gemini_api_key=getattr(settings, "GEMINI_API_KEY", None),
            gemini_model=getattr(settings, "GEMINI_MODEL", None) or "gemini-1.5-flash",
            temperature=float(getattr(settings, "LLM_TEMPERATURE", 0.2)),
            max_retries=int(getattr(settings, "LLM_MAX_RETRIES", 0)),
        )

    @property
    def api_key(self) -> Optional[str]:
        if self.provider == "gemini":
            return self.gemini_api_key
        if self.provider == "openai":
            return self.openai_api_key
        return None

    def is_supported(self) -> bool:
        return self.provider in SUPPORTED_PROVIDERS

    def missing_credential(self) -> Optional[str]:
        """Tên biến môi trường còn thiếu cho provider hiện tại (None nếu đủ)."""
        if not self.is_supported() or self.api_key:
            return None
        return CREDENTIAL_ENV[self.provider]
