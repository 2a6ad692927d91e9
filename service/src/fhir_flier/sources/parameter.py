from pydantic import BaseModel, ConfigDict


class FHIRSearchParameter(BaseModel):
    """A FHIR SearchParameter definition, detached from any storage."""

    model_config = ConfigDict(frozen=True)

    code: str
    type: str  # number | date | string | token | reference | composite | quantity | uri | special
    expression: str
    description: str | None = None
    modifier: list[str] = []  # e.g. exact, contains, identifier
    target: list[str] = []  # target resource types of reference parameters
    component: list[dict] = []  # components of composite parameters
