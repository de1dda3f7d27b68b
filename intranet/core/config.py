"""
Configuración centralizada de la aplicación.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación usando Pydantic Settings para validación automática.
"""

from functools import lru_cache
from typing import Dict, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA DE LA APP ===
    APP_NAME: str = "Intranet Sync Service"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", env="ENV")
    DEBUG: bool = Field(default=True, env="DEBUG")

    # === CONFIGURACIÓN DEL SERVIDOR ===
    HOST: str = Field(default="0.0.0.0", env="HOST")
    PORT: int = Field(default=8080, env="PORT")
    WORKERS: int = Field(default=1, env="WORKERS")
    LOG_LEVEL: str = Field(default="INFO", env="LOG_LEVEL")

    # === CONFIGURACIÓN DE SEGURIDAD ===
    ALLOWED_HOSTS: Optional[List[str]] = Field(default=None, env="ALLOWED_HOSTS")

    # === CONFIGURACIÓN DE STRAPI (CMS) ===
    STRAPI_URL: str = Field(default="http://localhost:1337", env="STRAPI_URL")
    STRAPI_API_TOKEN: Optional[str] = Field(default=None, env="STRAPI_API_TOKEN")

    # === CONFIGURACIÓN DE WOOCOMMERCE ===
    WOO_MORALEJA_URL: Optional[str] = Field(default=None, env="WOO_MORALEJA_URL")
    WOO_MORALEJA_CONSUMER_KEY: Optional[str] = Field(default=None, env="WOO_MORALEJA_CONSUMER_KEY")
    WOO_MORALEJA_CONSUMER_SECRET: Optional[str] = Field(default=None, env="WOO_MORALEJA_CONSUMER_SECRET")
    WOO_ESCOLAR_URL: Optional[str] = Field(default=None, env="WOO_ESCOLAR_URL")
    WOO_ESCOLAR_CONSUMER_KEY: Optional[str] = Field(default=None, env="WOO_ESCOLAR_CONSUMER_KEY")
    WOO_ESCOLAR_CONSUMER_SECRET: Optional[str] = Field(default=None, env="WOO_ESCOLAR_CONSUMER_SECRET")
    WOO_API_PATH: str = Field(default="/wp-json/wc/v3", env="WOO_API_PATH")

    # === CONFIGURACIÓN DE CLIENTES HTTP ===
    HTTP_TIMEOUT_SECONDS: int = Field(default=30, env="HTTP_TIMEOUT_SECONDS")
    HTTP_CONNECT_TIMEOUT_SECONDS: int = Field(default=10, env="HTTP_CONNECT_TIMEOUT_SECONDS")
    HTTP_MAX_RETRIES: int = Field(default=3, env="HTTP_MAX_RETRIES")
    RETRY_BACKOFF_FACTOR: float = Field(default=2.0, env="RETRY_BACKOFF_FACTOR")

    # === CONFIGURACIÓN DE RESOLUCIÓN DE REGISTROS ===
    # Tamaño de página para el escaneo completo cuando fallan los filtros
    RESOLVER_SCAN_PAGE_SIZE: int = Field(default=1000, env="RESOLVER_SCAN_PAGE_SIZE")

    # === CONFIGURACIÓN DE PEDIDOS ===
    ORDER_DIRECT_PLATFORM_SYNC: bool = Field(default=True, env="ORDER_DIRECT_PLATFORM_SYNC")
    ORDER_TOTAL_MISMATCH_RATIO: float = Field(default=0.05, env="ORDER_TOTAL_MISMATCH_RATIO")
    DEFAULT_CURRENCY: str = Field(default="CLP", env="DEFAULT_CURRENCY")
    DEFAULT_COUNTRY: str = Field(default="CL", env="DEFAULT_COUNTRY")
    GUEST_CUSTOMER_NAME: str = Field(default="Cliente Invitado", env="GUEST_CUSTOMER_NAME")

    # === CONFIGURACIÓN DE IMPORTACIÓN DE MATRICULADOS ===
    IMPORT_MAX_FILE_SIZE_MB: int = Field(default=100, env="IMPORT_MAX_FILE_SIZE_MB")
    IMPORT_READ_TIMEOUT_SECONDS: float = Field(default=60.0, env="IMPORT_READ_TIMEOUT_SECONDS")

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_FILE_PATH: Optional[str] = Field(default="logs/app.log", env="LOG_FILE_PATH")
    LOG_MAX_SIZE_MB: int = Field(default=10, env="LOG_MAX_SIZE_MB")
    LOG_BACKUP_COUNT: int = Field(default=5, env="LOG_BACKUP_COUNT")

    # === CONFIGURACIÓN DE MONITOREO ===
    SLOW_REQUEST_THRESHOLD: float = Field(default=5.0, env="SLOW_REQUEST_THRESHOLD")

    # === CONFIGURACIÓN DE DOCUMENTACIÓN ===
    ENABLE_DOCS: bool = Field(default=True, env="ENABLE_DOCS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "allow",  # Permitir valores extra para flexibilidad futura
    }

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parsea ALLOWED_HOSTS como lista separada por comas."""
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("STRAPI_URL", "WOO_MORALEJA_URL", "WOO_ESCOLAR_URL")
    @classmethod
    def strip_trailing_slash(cls, v):
        """Elimina el slash final de las URLs base."""
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Valida que el puerto esté en rango válido."""
        if not 1 <= v <= 65535:
            raise ValueError("PORT debe estar entre 1 y 65535")
        return v

    @field_validator("ORDER_TOTAL_MISMATCH_RATIO")
    @classmethod
    def validate_mismatch_ratio(cls, v):
        """Valida que la tolerancia de totales sea un ratio no negativo."""
        if v < 0:
            raise ValueError("ORDER_TOTAL_MISMATCH_RATIO no puede ser negativo")
        return v

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def strapi_api_base_url(self) -> str:
        """URL base de la API REST de Strapi."""
        return f"{self.STRAPI_URL}/api"

    def get_strapi_headers(self) -> dict:
        """
        Obtiene headers para requests a Strapi.

        Returns:
            dict: Headers de autenticación
        """
        headers = {
            "Content-Type": "application/json",
            "User-Agent": f"{self.APP_NAME}/{self.APP_VERSION}",
        }
        if self.STRAPI_API_TOKEN:
            headers["Authorization"] = f"Bearer {self.STRAPI_API_TOKEN}"
        return headers

    def get_woocommerce_platforms(self) -> Dict[str, Dict[str, Optional[str]]]:
        """
        Credenciales de cada tienda WooCommerce indexadas por código de plataforma.

        Returns:
            dict: {codigo_plataforma: {url, consumer_key, consumer_secret}}
        """
        return {
            "woo_moraleja": {
                "url": self.WOO_MORALEJA_URL,
                "consumer_key": self.WOO_MORALEJA_CONSUMER_KEY,
                "consumer_secret": self.WOO_MORALEJA_CONSUMER_SECRET,
            },
            "woo_escolar": {
                "url": self.WOO_ESCOLAR_URL,
                "consumer_key": self.WOO_ESCOLAR_CONSUMER_KEY,
                "consumer_secret": self.WOO_ESCOLAR_CONSUMER_SECRET,
            },
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene instancia singleton de configuración.

    Returns:
        Settings: Configuración de la aplicación
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Recarga la configuración limpiando el cache.

    Returns:
        Settings: Nueva instancia de configuración
    """
    get_settings.cache_clear()
    return get_settings()
