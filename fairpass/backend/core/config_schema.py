"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema   → application.yaml
    DatabaseSchema      → database.yaml
    LoggingSchema       → logging.yaml
    FeaturesSchema      → features.yaml
    SecuritySchema      → security.yaml
    IntegrationsSchema  → integrations.yaml
"""

from pydantic import BaseModel, ConfigDict


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int


class CorsSchema(_StrictBase):
    origins: list[str]


class PaginationSchema(_StrictBase):
    default_limit: int
    max_limit: int


class TimeoutsSchema(_StrictBase):
    database: int


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str
    docs_enabled: bool
    public_url: str
    server: ServerSchema
    cors: CorsSchema
    pagination: PaginationSchema
    timeouts: TimeoutsSchema


# =============================================================================
# database.yaml
# =============================================================================


class BrokerSchema(_StrictBase):
    queue_name: str
    result_expiry_seconds: int


class RedisSchema(_StrictBase):
    host: str
    port: int
    db: int
    broker: BrokerSchema


class DatabaseSchema(_StrictBase):
    host: str
    port: int
    name: str
    user: str
    pool_size: int
    max_overflow: int
    pool_timeout: int
    pool_recycle: int
    echo: bool
    echo_pool: bool
    redis: RedisSchema


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    notifications_enabled: bool
    crm_sync_enabled: bool
    ai_enrichment_enabled: bool
    registration_rate_limit_enabled: bool
    api_detailed_errors: bool
    security_startup_checks_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: str
    access_token_expire_minutes: int
    audience: str


class WindowRateLimitSchema(_StrictBase):
    limit: int
    window_seconds: int


class RateLimitingSchema(_StrictBase):
    registration: WindowRateLimitSchema


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int


class CorsEnforcementSchema(_StrictBase):
    allow_methods: list[str]
    allow_headers: list[str]


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    rate_limiting: RateLimitingSchema
    secrets_validation: SecretsValidationSchema
    cors: CorsEnforcementSchema


# =============================================================================
# integrations.yaml
# =============================================================================


class HttpClientSchema(_StrictBase):
    timeout_seconds: float
    retry_attempts: int
    retry_max_wait_seconds: int
    breaker_fail_max: int
    breaker_timeout_seconds: int


class EmailSchema(_StrictBase):
    api_url: str
    from_address: str
    admin_recipients: list[str]


class WhatsAppSchema(_StrictBase):
    api_base_url: str
    from_number: str


class ZohoSchema(_StrictBase):
    accounts_domain: str
    api_domain: str
    default_lead_source: str


class OpenAISchema(_StrictBase):
    model: str


class EnrichmentSchema(_StrictBase):
    batch_size: int
    delay_seconds: float


class RemindersSchema(_StrictBase):
    window_hours: int
    label: str


class IntegrationsSchema(_StrictBase):
    http: HttpClientSchema
    email: EmailSchema
    whatsapp: WhatsAppSchema
    zoho: ZohoSchema
    openai: OpenAISchema
    enrichment: EnrichmentSchema
    reminders: RemindersSchema
