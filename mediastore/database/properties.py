"""Connection parameters for a database."""

from pydantic import BaseModel, Field, field_validator

from mediastore.constants import CONNECT_TIMEOUT


class ConnectionProperties(BaseModel):
    """Parameters used to open a DatabaseConnection."""

    type: str = Field(description="Driver type code, e.g. 'sqlite' or 'postgresql'")
    name: str = Field(default="", description="Display name of the connection")
    database_name: str | None = Field(default=None, description="Database name")
    hostname: str | None = Field(default=None, description="Database host")
    port: int = Field(default=0, description="Database port, 0 when not set")
    username: str | None = Field(default=None, description="Database user")
    password: str | None = Field(default=None, description="Database password")
    directory: str | None = Field(
        default=None, description="Directory holding embedded database files"
    )
    parameters: str | None = Field(
        default=None, description="Extra URL parameters appended to the connection"
    )
    connect_timeout: int = Field(
        default=CONNECT_TIMEOUT, description="Login timeout in seconds"
    )

    @field_validator("port", mode="before")
    @classmethod
    def parse_port(cls, v: int | str | None) -> int:
        """Accept ports given as strings and treat blanks as unset."""
        if v is None or v == "":
            return 0
        return int(v)
