"""Shared data types."""

from dataclasses import dataclass


@dataclass
class Instance:
    """Identity of the instance a driver operates on."""

    name: str = "default"
    suite: str = "default"

    @property
    def state_filename(self) -> str:
        return f"{self.name}.json"
