from .pipeline import Pipeline as Pipeline
from .registry import (
    Registry as Registry,
    RegistryBuilder as RegistryBuilder,
)
