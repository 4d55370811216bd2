from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class ContributorSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    # strict types: upstream values are copied as-is, never coerced
    id: StrictInt
    login: StrictStr
    avatar_url: StrictStr
    contributions: StrictInt = Field(ge=0)
    profile_url: StrictStr


class QueryParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str

    def is_complete(self) -> bool:
        return bool(self.owner.strip()) and bool(self.repo.strip())


class ErrorResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
