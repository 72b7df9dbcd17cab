from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "user-accounts"
    environment: str = "local"
    debug: bool = True

    log_level: str = "INFO"
    log_json: bool = False

    mongo_port: int = 27017
    mongo_host: str = "localhost"
    mongo_db: str = "user_accounts"
    mongo_password: str | None = None
    mongo_params: str | None = None
    mongo_user: str | None = None
    mongo_scheme: str = "mongodb+srv"
    mongo_tls: bool = True

    jwt_algorithm: str = "HS256"
    jwt_secret_key: str = "very-secret-key"
    token_expires_minutes: int = 60
    bcrypt_rounds: int = 10

    allowed_email_tlds: list[str] = ["com", "net"]

    avatars_dir: str = "public/avatars"
    temp_dir: str = "temp"

    redis_db: int = 0
    redis_port: int = 6379
    redis_host: str = "localhost"
    redis_password: str | None = None
    token_denylist_enabled: bool = False

    smtp_host: str = "smtp.ethereal.email"
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_starttls: bool = True
    mail_from: str = "no-reply@localhost"
    verification_base_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(env_file=(".env",), case_sensitive=True)

    @property
    def mongo_uri(self) -> str:
        auth = ""
        if self.mongo_user and self.mongo_password:
            auth = f"{self.mongo_user}:{self.mongo_password}@"
        host = self.mongo_host
        if self.mongo_scheme == "mongodb":
            # srv records carry their own port
            host = f"{host}:{self.mongo_port}"
        params = f"?{self.mongo_params}" if self.mongo_params else "?retryWrites=true&w=majority"
        return f"{self.mongo_scheme}://{auth}{host}/{self.mongo_db}{params}"


settings = Settings()
