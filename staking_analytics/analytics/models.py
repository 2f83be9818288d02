from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class StakingEvent(BaseModel):
    model_config = ConfigDict(frozen=True)
    
    staker: str
    token_id: str
    staking_start_time: int
    staking_end_time: Optional[int] = None
    
    @field_validator('token_id', mode='before')
    @classmethod
    def coerce_token_id(cls, v):
        if isinstance(v, int):
            return str(v)
        return v


class StakerSummary(BaseModel):
    model_config = ConfigDict(frozen=True)
    
    address: str
    nfts_staked: int = Field(..., ge=0)
    total_duration_in_days: int


class ProcessedStakingData(BaseModel):
    model_config = ConfigDict(frozen=True)
    
    unique_stakers: List[StakerSummary] = Field(default_factory=list)
    total_unique_stakers: int = Field(default=0, ge=0)
    total_nfts_staked: int = Field(default=0, ge=0)
    average_staking_duration: int = 0
