from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    table_count: int = 20
    table_capacity: int = 4
    table_label_prefix: str = "Table"

    waiter_role: str = "waiter"
    cashier_role: str = "cashier"

    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="FLOORSYNC_", case_sensitive=False)


settings = Settings()
