"""Admin credential model."""

from dataclasses import dataclass

DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "password"


@dataclass(frozen=True)
class Credentials:
    """The single admin username/password pair."""

    username: str
    password: str

    @classmethod
    def default(cls) -> "Credentials":
        return cls(username=DEFAULT_USERNAME, password=DEFAULT_PASSWORD)

    def to_dict(self) -> dict[str, str]:
        return {"username": self.username, "password": self.password}
