"""
Configuracion central de los nodos SeaTable.
Gestiona variables de entorno y configuraciones globales.
"""
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - SEATABLE_SERVER_URL / SEATABLE_API_TOKEN: credenciales de la base.
      Un token vacio equivale a "sin credenciales".
    - LOG_FILE vacio desactiva el log a archivo.
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="SeaTable Nodes")
    APP_VERSION: str = Field(default="1.0.0")
    ENVIRONMENT: str = Field(default="production")

    # SeaTable
    SEATABLE_SERVER_URL: str = Field(default="https://cloud.seatable.io")
    SEATABLE_API_TOKEN: str = Field(default="")
    HTTP_TIMEOUT_S: float = Field(default=30.0)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/seatable_nodes.log")

    # Estado del trigger (solo host CLI)
    TRIGGER_STATE_FILE: str = Field(default="state/seatable_trigger.json")

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """En desarrollo se fuerza DEBUG salvo que LOG_LEVEL sea explicito."""
        if self.is_development and self.LOG_LEVEL.upper() == "INFO":
            return "DEBUG"
        return self.LOG_LEVEL.upper()

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Instancia global de configuracion
settings = Settings()
