"""Response shapes of the Rfam sequence search API."""

from pydantic import BaseModel, ConfigDict, Field


class _ServiceModel(BaseModel):
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class SubmitResponse(_ServiceModel):
    job_id: str = Field(default="", alias="jobId")
    result_url: str = Field(default="", alias="resultURL")
    opened: str = ""
    estimated_time: str = Field(default="", alias="estimatedTime")


class AlignmentSchema(_ServiceModel):
    user_seq: str = ""
    hit_seq: str = ""
    ss: str = ""
    match: str = ""
    pp: str = ""
    nc: str = ""


class HitSchema(_ServiceModel):
    acc: str
    id: str = ""
    score: float
    e_value: float = Field(alias="E")
    start: int
    end: int
    strand: str = ""
    gc: float = Field(default=0.0, alias="GC")
    alignment: AlignmentSchema = Field(default_factory=AlignmentSchema)


class RunningResponse(_ServiceModel):
    status: str
    job_id: str = Field(default="", alias="jobId")


class ClosedResponse(_ServiceModel):
    job_id: str = Field(default="", alias="jobId")
    opened: str = ""
    started: str = ""
    closed: str = Field(min_length=1)
    search_sequence: str = Field(default="", alias="searchSequence")
    num_hits: int = Field(default=0, alias="numHits")
    hits: dict[str, list[HitSchema]] = Field(default_factory=dict)
