from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("ramp-approvals-dashboard", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")

    # Ramp OAuth client (client-credentials grant)
    ramp_client_id: str | None = Field(default=None, alias="RAMP_CLIENT_ID")
    ramp_client_secret: str | None = Field(default=None, alias="RAMP_CLIENT_SECRET")
    ramp_environment: str = Field("sandbox", alias="RAMP_ENVIRONMENT")  # sandbox | production
    ramp_scope: str = Field("transactions:read reimbursements:read", alias="RAMP_SCOPE")
    ramp_http_timeout_seconds: float = Field(30.0, alias="RAMP_HTTP_TIMEOUT_SECONDS")

    # CORS allowed origins (comma-separated list, "*" allows all)
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Approval pipeline: a named preset, with optional per-field overrides
    approvals_preset: str = Field("dashboard", alias="APPROVALS_PRESET")
    approvals_threshold_dollars: float | None = Field(default=None, alias="APPROVALS_THRESHOLD_DOLLARS")
    approvals_limit: int | None = Field(default=None, alias="APPROVALS_LIMIT")
    approvals_lookback_days: int | None = Field(default=None, alias="APPROVALS_LOOKBACK_DAYS")
    # JSON object mapping Ramp department names to dashboard keys, e.g. {"Engineering": "it"}
    approvals_department_mapping: dict[str, str] = Field(default_factory=dict, alias="APPROVALS_DEPARTMENT_MAPPING")

    # Dashboard client
    dashboard_api_url: str = Field("http://127.0.0.1:8000/api/approvals", alias="DASHBOARD_API_URL")
    dashboard_refresh_seconds: float = Field(300.0, alias="DASHBOARD_REFRESH_SECONDS")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

settings = Settings()
