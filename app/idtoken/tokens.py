"""Provider-tagged raw tokens as handed over by the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar


class Provider(str, Enum):
    GOOGLE = "google"
    MICROSOFT = "microsoft"


@dataclass(frozen=True)
class GoogleToken:
    """Google Identity Services ID token (compact JWT)."""

    value: str = field(repr=False)
    provider: ClassVar[Provider] = Provider.GOOGLE


@dataclass(frozen=True)
class MicrosoftToken:
    """Microsoft identity platform v2.0 ID token (compact JWT)."""

    value: str = field(repr=False)
    provider: ClassVar[Provider] = Provider.MICROSOFT


RawToken = GoogleToken | MicrosoftToken
