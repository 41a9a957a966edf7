"""Process-wide mapping configuration.

MappingConfig is a Pydantic model. A binder reads it once when it is created;
each type then reads the default mode once, at its first metadata build.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from row_bind.core.enums import MappingMode


class MappingConfig(BaseModel):
    """Configuration shared by every type resolved through one binder."""

    model_config = ConfigDict(frozen=True)

    default_mode: MappingMode = MappingMode.AUTO
    include_private: bool = False
    numeric_widening: bool = True
