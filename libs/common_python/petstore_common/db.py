"""Database connection resolution shared by the pet store services.

Every service in this repository needs to answer the same question at process
start: *which database do I talk to, and how?* The answer depends on where the
process runs:

- on a platform-as-a-service, bound backing services are injected as a JSON
  document (`VCAP_SERVICES`),
- in Docker Compose / local setups, a single `DATABASE_URL` is common,
- developers sometimes export individual `DB_HOST` / `DB_PORT` / ... variables,
- and with nothing configured at all we fall back to a local PostgreSQL.

`resolve()` walks those sources in that fixed order and returns a
`ConnectionDescriptor`. It never raises: a malformed service-binding document
is logged and skipped. The descriptor is a plain value that the caller passes
into `to_sqlalchemy_url()` / `connect_args()` when building the engine.
"""

from dataclasses import dataclass, field
from enum import Enum
import json
import logging
import os
import re
from typing import Any, Mapping

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

logger = logging.getLogger(__name__)

SERVICE_BINDING_VARS = ("VCAP_SERVICES", "SERVICE_BINDINGS_JSON")
DATABASE_URL_VAR = "DATABASE_URL"
DATABASE_SSL_VAR = "DATABASE_SSL"
INDIVIDUAL_VARS = ("DB_HOST", "DB_PORT", "DB_NAME", "DB_USER", "DB_PASSWORD")

MYSQL_SCHEME = "mysql://"
MYSQL_SERVER_TOKEN = "Server="

DEFAULT_HOST = "localhost"
DEFAULT_DATABASE = "demodb"
DEFAULT_USER = "demouser"
DEFAULT_PASSWORD = "demopass"

_TRUTHY = {"true", "1", "yes", "on"}
_KEYVALUE_PATTERN = re.compile(r"^[A-Za-z][A-Za-z ]*=")

# Ordered candidate keys per credential field; first present wins.
CREDENTIAL_KEYS = {
    "host": ("host", "hostname"),
    "port": ("port",),
    "database": ("name", "database"),
    "user": ("username", "user"),
    "password": ("password",),
}

# Key/value connection string keys (lower-cased) per structured field.
_KEYVALUE_KEYS = {
    "host": ("host", "server", "data source"),
    "port": ("port",),
    "database": ("database", "initial catalog"),
    "user": ("username", "user", "user id", "uid"),
    "password": ("password", "pwd"),
}


class DriverKind(str, Enum):
    """Database wire protocol / client library to initialize."""

    POSTGRES = "postgres"
    MYSQL = "mysql"

    @property
    def display_name(self) -> str:
        return "MySQL" if self is DriverKind.MYSQL else "PostgreSQL"

    @property
    def default_port(self) -> int:
        return 3306 if self is DriverKind.MYSQL else 5432

    @property
    def sqlalchemy_driver(self) -> str:
        return "mysql+pymysql" if self is DriverKind.MYSQL else "postgresql+psycopg2"


class ServiceBindingError(ValueError):
    """Raised when the service-binding document is not usable JSON."""


@dataclass(frozen=True)
class ServiceBinding:
    """One bound service instance taken from the platform JSON."""

    label: str
    name: str | None = None
    credentials: Mapping[str, Any] = field(default_factory=dict)

    def credential(self, field_name: str) -> Any:
        """Return the first present credential value for a structured field.

        Args:
            field_name: One of the keys of `CREDENTIAL_KEYS` (host, port, ...).

        Returns:
            The value of the first candidate key found, or None.
        """
        for key in CREDENTIAL_KEYS[field_name]:
            value = self.credentials.get(key)
            if value is not None and value != "":
                return value
        return None


@dataclass(frozen=True)
class ConnectionDescriptor:
    """Resolved parameters needed to open a database connection.

    Either `connection_string` is set, or the structured fields are.
    """

    driver_kind: DriverKind = DriverKind.POSTGRES
    connection_string: str | None = None
    host: str | None = None
    port: int | None = None
    database: str | None = None
    user: str | None = None
    password: str | None = None
    tls_required: bool = False
    trust_server_certificate: bool = False
    source: str = "defaults"

    def __post_init__(self):
        if self.driver_kind is None:
            object.__setattr__(self, "driver_kind", DriverKind.POSTGRES)
        elif not isinstance(self.driver_kind, DriverKind):
            object.__setattr__(self, "driver_kind", DriverKind(self.driver_kind))
        if self.connection_string is None and self.host is None:
            object.__setattr__(self, "host", DEFAULT_HOST)

    @property
    def uses_connection_string(self) -> bool:
        return self.connection_string is not None

    def redacted(self) -> str:
        """Human-readable summary without the password, for log lines."""
        if self.uses_connection_string:
            return f"{self.driver_kind.value} via connection string ({self.source})"
        return (
            f"{self.driver_kind.value}://{self.user or ''}@{self.host}:{self.port}"
            f"/{self.database or ''} ({self.source}, tls={'on' if self.tls_required else 'off'})"
        )


def default_descriptor() -> ConnectionDescriptor:
    """Return the static local-development descriptor."""
    return ConnectionDescriptor(
        driver_kind=DriverKind.POSTGRES,
        host=DEFAULT_HOST,
        port=DriverKind.POSTGRES.default_port,
        database=DEFAULT_DATABASE,
        user=DEFAULT_USER,
        password=DEFAULT_PASSWORD,
        tls_required=False,
        source="defaults",
    )


def detect_driver_kind(connection_string: str) -> DriverKind:
    """Classify a bare connection string.

    A case-sensitive `Server=` token marks a MySQL-style key/value string;
    anything else is treated as PostgreSQL.

    Args:
        connection_string: Raw connection string without a driver hint.

    Returns:
        DriverKind: `MYSQL` if the token is present, otherwise `POSTGRES`.
    """
    if MYSQL_SERVER_TOKEN in connection_string:
        return DriverKind.MYSQL
    return DriverKind.POSTGRES


def normalize_port(value: Any, default: int) -> int:
    """Normalize a port given as int or numeric string.

    Args:
        value: Raw port value from JSON or the environment.
        default: Port used when the value is missing or not numeric.

    Returns:
        int: The port number.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        logger.warning("Ignoring boolean port value %r; using %d", value, default)
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError:
        logger.warning("Ignoring non-numeric port %r; using %d", value, default)
        return default


def parse_service_bindings(raw: str) -> dict[str, list[ServiceBinding | None]]:
    """Parse a platform service-binding document.

    Args:
        raw: JSON text mapping service labels to arrays of service instances.

    Returns:
        dict[str, list[ServiceBinding | None]]: Bindings per label, in their
        original positions. Entries that are not objects with a `credentials`
        object are kept as None.

    Raises:
        ServiceBindingError: If the text is not JSON or the root is not an object.
    """
    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ServiceBindingError(f"service bindings are not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ServiceBindingError("service bindings root must be a JSON object")

    bindings: dict[str, list[ServiceBinding | None]] = {}
    for label, instances in document.items():
        if not isinstance(instances, list):
            continue
        parsed = []
        for instance in instances:
            credentials = instance.get("credentials") if isinstance(instance, dict) else None
            if not isinstance(credentials, dict):
                parsed.append(None)
                continue
            parsed.append(
                ServiceBinding(label=str(label), name=instance.get("name"), credentials=credentials)
            )
        bindings[str(label)] = parsed
    return bindings


def _descriptor_from_binding(binding: ServiceBinding, kind: DriverKind) -> ConnectionDescriptor:
    host = binding.credential("host")
    database = binding.credential("database")
    user = binding.credential("user")
    password = binding.credential("password")
    return ConnectionDescriptor(
        driver_kind=kind,
        host=str(host) if host is not None else DEFAULT_HOST,
        port=normalize_port(binding.credential("port"), kind.default_port),
        database=str(database) if database is not None else None,
        user=str(user) if user is not None else None,
        password=str(password) if password is not None else None,
        tls_required=True,
        trust_server_certificate=kind is DriverKind.POSTGRES,
        source="service-binding",
    )


def _from_service_bindings(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    for var in SERVICE_BINDING_VARS:
        raw = environ.get(var)
        if not raw:
            continue
        try:
            bindings = parse_service_bindings(raw)
        except ServiceBindingError as exc:
            logger.warning("Ignoring %s: %s", var, exc)
            continue
        # mysql wins over postgres when both are bound
        for kind in (DriverKind.MYSQL, DriverKind.POSTGRES):
            instances = bindings.get(kind.value)
            # only the first instance is considered; an unusable one counts as absent
            if instances and instances[0] is not None:
                logger.info("Detected %s service from %s", kind.display_name, var)
                return _descriptor_from_binding(instances[0], kind)
    return None


def _from_database_url(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    url = environ.get(DATABASE_URL_VAR)
    if not url:
        return None
    if MYSQL_SCHEME in url:
        logger.info("Using %s (MySQL URL)", DATABASE_URL_VAR)
        return ConnectionDescriptor(
            driver_kind=DriverKind.MYSQL,
            connection_string=url.split(MYSQL_SCHEME, 1)[1],
            source="database-url",
        )
    kind = detect_driver_kind(url)
    tls = environ.get(DATABASE_SSL_VAR, "").strip().lower() in _TRUTHY
    logger.info("Using %s (%s connection string)", DATABASE_URL_VAR, kind.display_name)
    return ConnectionDescriptor(
        driver_kind=kind,
        connection_string=url,
        tls_required=tls,
        trust_server_certificate=tls,
        source="database-url",
    )


def _from_individual_vars(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    if not any(environ.get(var) for var in INDIVIDUAL_VARS):
        return None
    logger.info("Using PostgreSQL configuration from DB_* environment variables")
    return ConnectionDescriptor(
        driver_kind=DriverKind.POSTGRES,
        host=environ.get("DB_HOST") or DEFAULT_HOST,
        port=normalize_port(environ.get("DB_PORT"), DriverKind.POSTGRES.default_port),
        database=environ.get("DB_NAME") or DEFAULT_DATABASE,
        user=environ.get("DB_USER") or DEFAULT_USER,
        password=environ.get("DB_PASSWORD") or DEFAULT_PASSWORD,
        tls_required=False,
        source="environment",
    )


def resolve(environ: Mapping[str, str] | None = None, *, use_individual_vars: bool = True) -> ConnectionDescriptor:
    """Resolve the database connection for this process.

    Sources are tried in a fixed order, first match wins:
        1. service-binding JSON (`VCAP_SERVICES`, then `SERVICE_BINDINGS_JSON`)
        2. `DATABASE_URL` (plus `DATABASE_SSL` for non-MySQL-URL values)
        3. `DB_HOST` / `DB_PORT` / `DB_NAME` / `DB_USER` / `DB_PASSWORD`
           (only when `use_individual_vars` is true)
        4. static local-development defaults

    Args:
        environ: Environment mapping; defaults to `os.environ`.
        use_individual_vars: Whether the `DB_*` variables are consulted before
            the static defaults.

    Returns:
        ConnectionDescriptor: Always a usable descriptor.
    """
    env = os.environ if environ is None else environ

    descriptor = _from_service_bindings(env) or _from_database_url(env)
    if descriptor is None and use_individual_vars:
        descriptor = _from_individual_vars(env)
    if descriptor is None:
        logger.info("Using default PostgreSQL configuration for local development")
        descriptor = default_descriptor()
    return descriptor


def _parse_keyvalue(connection_string: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for part in connection_string.split(";"):
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        pairs[key.strip().lower()] = value.strip()
    return pairs


def _pick(pairs: Mapping[str, str], field_name: str) -> str | None:
    for key in _KEYVALUE_KEYS[field_name]:
        if pairs.get(key):
            return pairs[key]
    return None


def to_sqlalchemy_url(descriptor: ConnectionDescriptor) -> URL:
    """Build the SQLAlchemy URL for a resolved descriptor.

    Handles the three shapes a descriptor can carry:
        - structured fields (service bindings, DB_* variables, defaults),
        - URL connection strings (`postgres://...`, or the scheme-stripped
          MySQL remainder `user:pass@host:3306/db`),
        - key/value strings (`Host=...;Port=...` or `Server=...;User=...`).

    Args:
        descriptor: Output of `resolve()`.

    Returns:
        sqlalchemy.engine.URL: URL targeting psycopg2 or PyMySQL.
    """
    kind = descriptor.driver_kind
    drivername = kind.sqlalchemy_driver

    if not descriptor.uses_connection_string:
        return URL.create(
            drivername,
            username=descriptor.user,
            password=descriptor.password,
            host=descriptor.host,
            port=descriptor.port,
            database=descriptor.database,
        )

    raw = descriptor.connection_string.strip()
    if "://" not in raw and _KEYVALUE_PATTERN.match(raw):
        pairs = _parse_keyvalue(raw)
        port = _pick(pairs, "port")
        return URL.create(
            drivername,
            username=_pick(pairs, "user"),
            password=_pick(pairs, "password"),
            host=_pick(pairs, "host"),
            port=normalize_port(port, kind.default_port) if port else None,
            database=_pick(pairs, "database"),
        )

    if "://" not in raw:
        raw = f"{drivername}://{raw}"
    try:
        url = make_url(raw)
    except ArgumentError as exc:
        raise ValueError(f"Unsupported {kind.display_name} connection string") from exc
    return url.set(drivername=drivername)


def connect_args(descriptor: ConnectionDescriptor) -> dict[str, Any]:
    """DBAPI `connect_args` carrying the descriptor's TLS policy.

    Args:
        descriptor: Output of `resolve()`.

    Returns:
        dict: Keyword arguments for psycopg2 / PyMySQL `connect()`.
    """
    if descriptor.driver_kind is DriverKind.MYSQL:
        if not descriptor.tls_required:
            return {}
        # no CA configured, so PyMySQL skips certificate verification
        return {"ssl": {"check_hostname": False}}
    if descriptor.tls_required:
        return {"sslmode": "require"}
    if descriptor.uses_connection_string and "sslmode" in to_sqlalchemy_url(descriptor).query:
        return {}
    return {"sslmode": "disable"}
