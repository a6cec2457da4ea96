from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured


class FitplanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fitplan"

    def ready(self) -> None:
        from fitplan.shared.llm import SUPPORTED_PROVIDERS, LLMConfig

        cfg = LLMConfig.from_settings()
        if not cfg.is_supported():
            raise ImproperlyConfigured(
                f"LLM_PROVIDER={cfg.provider} no es compatible. "
                f"Valores permitidos: {', '.join(SUPPORTED_PROVIDERS)}."
            )
        missing = cfg.missing_credential()
        if missing:
            # Không có credential -> không start được service
            raise ImproperlyConfigured(
                f"La clave de API no está configurada (LLM_PROVIDER={cfg.provider}). "
                f"Por favor, establece la variable de entorno {missing}."
            )
        print(f"[LLM] provider={cfg.provider} ready")
