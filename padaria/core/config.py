# padaria/core/config.py

from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações da aplicação, carregadas uma única vez a partir de variáveis
    de ambiente (e do arquivo .env, se existir).
    """
    # --- Banco de Dados ---
    # Se DATABASE_URL vier preenchida ela tem prioridade sobre os campos DB_*.
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "padaria"
    DB_POOL_SIZE: int = 10

    # Cria as tabelas no startup (desligar quando o schema é gerido fora da API)
    CREATE_TABLES: bool = True

    # --- Servidor HTTP ---
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # --- Regras de negócio ---
    LOW_STOCK_THRESHOLD: int = 50

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+pymysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


# Instância única usada em toda a aplicação.
settings = Settings()
