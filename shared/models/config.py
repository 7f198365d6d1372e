from pydantic import BaseModel


class EnvConfig(BaseModel):
    """
    A single environment setting read by a client.

    Attributes:
        env_key (str): The raw key, prefixed with "{TYPE}_{ENGINE}_" when resolved (e.g. "URL" → "DB_SUPABASE_URL").
        val_type (str): One of "string", "number", "bool" and "list".
        default (str | int | bool | list | None): Value used when the variable is unset. None marks the key as required.
    """

    env_key: str
    val_type: str
    default: str | int | bool | list | None = None
