from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from fitplan.shared.llm.config import LLMConfig


def _log_prompt_stats(tag: str, prompt: str) -> None:
    try:
        prompt = prompt or ""
        chars = len(prompt)
        lines = prompt.count("\n") + 1
        approx_tokens = chars // 4  # ước lượng thô
        head = prompt[:300].replace("\n", "\\n")
        print(f"[LLM][{tag}] prompt_chars={chars} prompt_lines={lines} approx_tokens~={approx_tokens}")
        print(f"[LLM][{tag}] prompt_head={head}")
    except Exception:
        print(f"[LLM][{tag}] prompt log failed")


def _to_dict(result: Any) -> Dict[str, Any]:
    if result is None:
        # LangChain trả None khi model không trả được structured output
        raise ValueError("LLM returned no structured output")
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True)
    return dict(result)


class LLMClient:
    """
    Generic LLM client.
    Structured output theo schema Pydantic bất kỳ, trả dict (camelCase theo alias).
    """

    def __init__(self, cfg: Optional[LLMConfig] = None) -> None:
        self.cfg = cfg or LLMConfig.from_settings()

    def generate_structured(self, prompt: str, schema_model: Type[BaseModel]) -> Dict[str, Any]:
        if self.cfg.provider == "gemini":
            return self._gemini_generate_structured(prompt, schema_model)
        if self.cfg.provider == "openai":
            return self._openai_generate_structured(prompt, schema_model)
        raise ValueError(f"Unsupported LLM_PROVIDER={self.cfg.provider}")

    # -----------------------------
    # Providers
    # -----------------------------
    def _gemini_generate_structured(self, prompt: str, schema_model: Type[BaseModel]) -> Dict[str, Any]:
        if not self.cfg.gemini_api_key:
            raise RuntimeError("Missing GEMINI_API_KEY (or GOOGLE_API_KEY)")

        _log_prompt_stats("GEMINI_LANGCHAIN_INPUT", prompt)

        from langchain_google_genai import ChatGoogleGenerativeAI

        llm = ChatGoogleGenerativeAI(
            model=self.cfg.gemini_model,
            temperature=self.cfg.temperature,
            max_retries=self.cfg.max_retries,
            google_api_key=self.cfg.gemini_api_key,
        )

        # Ưu tiên json_schema nếu version hỗ trợ để structured ổn định hơn
        try:
            structured = llm.with_structured_output(schema_model, method="json_schema")
        except TypeError:
            structured = llm.with_structured_output(schema_model)

        return _to_dict(structured.invoke(prompt))

    def _openai_generate_structured(self, prompt: str, schema_model: Type[BaseModel]) -> Dict[str, Any]:
        if not self.cfg.openai_api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")

        _log_prompt_stats("OPENAI_LANGCHAIN_INPUT", prompt)

        from langchain_openai import ChatOpenAI

        llm = ChatOpenAI(
            model=self.cfg.openai_model,
            api_key=self.cfg.openai_api_key,
            temperature=self.cfg.temperature,
            max_retries=self.cfg.max_retries,
        )

        # strict json_schema của OpenAI không chấp nhận field có default -> dùng mặc định
        structured = llm.with_structured_output(schema_model)
        return _to_dict(structured.invoke(prompt))


_LLM: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Lazy singleton, dùng lại cho mọi request."""
    global _LLM
    if _LLM is None:
        _LLM = LLMClient()
    return _LLM
