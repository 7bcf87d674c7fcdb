from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base de las entidades: atributos snake_case en Python y claves camelCase
    en la API y en los archivos de exportación.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_public(self) -> dict:
        return self.model_dump(by_alias=True)
