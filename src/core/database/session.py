"""
Database connection utilities.
Handles Supabase client initialization and management.
"""

from typing import Any, Optional

from supabase import Client, ClientOptions, create_client

from src.core.database.interface import IDatabaseSession
from src.core.utils import get_logger

logger = get_logger(__name__)


class SupabaseSession(IDatabaseSession):
    """
    Wrapper for Supabase client implementing IDatabaseSession.
    """

    def __init__(self, client: Client):
        self._client = client

    def table(self, name: str) -> Any:
        return self._client.table(name)


class DatabaseConnection:
    """
    Lazily connected Supabase client.

    One instance per process is provided by the DI container; the
    connection is opened on first use.
    """

    def __init__(
        self,
        url: Optional[str],
        key: Optional[str],
        service_key: Optional[str] = None,
        db_schema: str = "public",
    ):
        self._url = url
        self._key = key
        self._service_key = service_key
        self._db_schema = db_schema
        self._client: Optional[Client] = None
        self._session: Optional[IDatabaseSession] = None

    def _validate_settings(self) -> None:
        missing: list[str] = []
        if not self._url:
            missing.append("SUPABASE_URL")
        if not (self._service_key or self._key):
            missing.append("SUPABASE_SERVICE_ROLE_KEY or SUPABASE_KEY")
        if missing:
            raise RuntimeError(
                "Supabase backend selected, but missing variables: "
                + ", ".join(missing)
            )

    def _connect(self):
        """Establish connection to Supabase."""
        try:
            self._validate_settings()

            # The backend uses the service role to bypass RLS when available
            api_key = self._service_key or self._key
            key_type = "SERVICE_KEY" if self._service_key else "ANON_KEY"

            options = ClientOptions(schema=self._db_schema)
            self._client = create_client(self._url, api_key, options=options)
            self._session = SupabaseSession(self._client)
            logger.info(
                "Connected to Supabase",
                schema=self._db_schema,
                key_type=key_type,
            )
        except Exception as e:
            logger.error("Failed to connect to Supabase", error=str(e))
            raise

    @property
    def client(self) -> Client:
        """Get Supabase client instance."""
        if self._client is None:
            self._connect()
        return self._client

    @property
    def session(self) -> IDatabaseSession:
        """Get database session instance."""
        if self._client is None:
            self._connect()
        return self._session

    def disconnect(self):
        """Disconnect from database."""
        # Supabase client doesn't require explicit disconnection
        self._client = None
        self._session = None
        logger.info("Disconnected from Supabase")
