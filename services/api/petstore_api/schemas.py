"""API schemas.

Pydantic response models. JSON field names follow the camelCase contract
shared by every pet store implementation (`deploymentColor`, `techStack`,
`languageVersion`), so the same front-end can talk to any of them.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PetOut(CamelModel):
    id: int
    race: str
    gender: str
    name: str
    age: int
    description: str | None = None


class TechStack(CamelModel):
    framework: str
    version: str
    language: str
    language_version: str
    runtime: str
    database: str


class TechStackInfo(CamelModel):
    uuid: str
    version: str
    deployment_color: str
    tech_stack: TechStack
