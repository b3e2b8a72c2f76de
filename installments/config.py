"""Configuration management for installments."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from installments.exceptions import ConfigurationError


@dataclass(frozen=True)
class PolicyConfig:
    """Business policy thresholds used by validation and contract assembly."""

    min_customer_income: Decimal = Decimal("8000")
    min_guarantor_income: Decimal = Decimal("10000")
    min_principal: Decimal = Decimal("1000")
    max_debt_to_income: Decimal = Decimal("40")
    days_per_month: int = 30  # contract end date policy, not calendar months
    contract_prefix: str = "CT"

    def __post_init__(self) -> None:
        if self.days_per_month <= 0:
            raise ConfigurationError("days_per_month must be positive")
        if not Decimal("0") < self.max_debt_to_income <= Decimal("100"):
            raise ConfigurationError("max_debt_to_income must be within (0, 100]")


DEFAULT_POLICY = PolicyConfig()


@dataclass
class KafkaConfig:
    """Kafka producer configuration for contract notifications."""

    bootstrap_servers: str = "localhost:9092"
    topic: str = "installments.contract-events"
    acks: str = "all"
    linger_ms: int = 5
    retries: int = 3

    def to_dict(self) -> dict[str, str | int]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "retries": self.retries,
        }


@dataclass
class PostgresConfig:
    """PostgreSQL connection configuration."""

    host: str = "localhost"
    port: int = 5432
    database: str = "installments"
    user: str = "postgres"
    password: str = "postgres"

    @property
    def connection_string(self) -> str:
        """Get connection string."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"


@dataclass
class OutputConfig:
    """Local file output configuration."""

    contracts_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class EngineConfig:
    """Top-level configuration for the installment engine."""

    policy: PolicyConfig = field(default_factory=PolicyConfig)
    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    postgres: PostgresConfig = field(default_factory=PostgresConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        try:
            policy = PolicyConfig(
                min_customer_income=Decimal(os.getenv("MIN_CUSTOMER_INCOME", "8000")),
                min_guarantor_income=Decimal(os.getenv("MIN_GUARANTOR_INCOME", "10000")),
                min_principal=Decimal(os.getenv("MIN_PRINCIPAL", "1000")),
                max_debt_to_income=Decimal(os.getenv("MAX_DEBT_TO_INCOME", "40")),
                contract_prefix=os.getenv("CONTRACT_PREFIX", "CT"),
            )
            postgres = PostgresConfig(
                host=os.getenv("POSTGRES_HOST", "localhost"),
                port=int(os.getenv("POSTGRES_PORT", "5432")),
                database=os.getenv("POSTGRES_DB", "installments"),
                user=os.getenv("POSTGRES_USER", "postgres"),
                password=os.getenv("POSTGRES_PASSWORD", "postgres"),
            )
        except (InvalidOperation, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            topic=os.getenv("KAFKA_TOPIC", "installments.contract-events"),
            acks=os.getenv("KAFKA_ACKS", "all"),
        )

        output = OutputConfig(
            contracts_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            policy=policy,
            kafka=kafka,
            postgres=postgres,
            output=output,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
