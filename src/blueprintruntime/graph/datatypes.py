from __future__ import annotations

from enum import Enum


class DataType(str, Enum):
    EXEC = "EXEC"
    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    ANY = "ANY"


class PinDirection(str, Enum):
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"
