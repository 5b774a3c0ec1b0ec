from __future__ import annotations
from typing import Dict

Row = Dict[str, str]
