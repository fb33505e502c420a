
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("payment-advice-reconciler", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Virtual-account digits printed in payment remarks
    account_number: str | None = Field(default=None, alias="ACCOUNT_NUMBER")

    # Azure Document Intelligence (OCR)
    az_di_endpoint: str | None = Field(default=None, alias="AZ_DI_ENDPOINT")
    az_di_api_key: str | None = Field(default=None, alias="AZ_DI_API_KEY")
    az_di_model: str = Field("prebuilt-read", alias="AZ_DI_MODEL")
    ocr_timeout_seconds: float = Field(60.0, alias="OCR_TIMEOUT_SECONDS")

    # Azure Blob Storage (uploaded payment advice images)
    az_storage_connection_string: str | None = Field(default=None, alias="AZ_STORAGE_CONNECTION_STRING")
    az_storage_container: str = Field("payment-advice", alias="AZ_STORAGE_CONTAINER")
    storage_timeout_seconds: int = Field(30, alias="STORAGE_TIMEOUT_SECONDS")

    # Local fallback when Azure storage is not configured
    local_upload_dir: str = Field("uploads", alias="LOCAL_UPLOAD_DIR")

    # SQLite database holding invoices and verification records
    database_path: str = Field("reconciler.db", alias="DATABASE_PATH")

    # Service Bus (optional)
    service_bus_connection_string: str | None = Field(default=None, alias="SERVICE_BUS_CONNECTION_STRING")
    service_bus_queue: str = Field("payment-events", alias="SERVICE_BUS_QUEUE")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("account_number")
    @classmethod
    def account_number_is_digits(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value.isascii() or not value.isdigit():
            raise ValueError("ACCOUNT_NUMBER must contain digits only")
        return value

settings = Settings()
