"""Signed-in user credentials carried with each mutation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    username: str
    pin: str
