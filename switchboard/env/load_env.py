import os
from typing import Callable, Dict, Mapping, TypeVar, Union

from dotenv import dotenv_values
from pydantic import BaseModel

from .env import Env

T = TypeVar("T", bound=BaseModel)

PrimaryType = Union[str, int, bool, float, bytes]


def _coerce(
    source: Mapping[str, str | None],
    types_map: Dict[str, Callable[[str], PrimaryType]],
) -> Dict[str, PrimaryType]:
    coerced: Dict[str, PrimaryType] = {}

    for name, to_type in types_map.items():
        raw_value = source.get(name)
        if raw_value:
            coerced[name] = to_type(raw_value)

    return coerced


def load_env(
    default: type[Env],
    env_file: str | None = None,
    override: T | None = None,
) -> T:
    """
    Build an Env from, lowest precedence first, the process
    environment, a dotenv file (`.env` unless given) and the fields
    explicitly set on `override`. Names outside the model's
    `types_map()` are ignored.
    """
    types_map = default.types_map()

    if env_file is None:
        env_file = ".env"

    values = _coerce(os.environ, types_map)

    if env_file and os.path.isfile(env_file):
        values.update(
            _coerce(dotenv_values(dotenv_path=env_file), types_map)
        )

    env_type = default
    if override is not None:
        values.update(override.model_dump(exclude_unset=True, exclude_none=True))
        env_type = type(override)

    return env_type(**values)
