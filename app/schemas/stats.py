from pydantic import BaseModel, Field


class AppStatsResponse(BaseModel):
    """Point-in-time totals. The two counts are not read atomically."""
    users: int = Field(..., ge=0)
    jobs: int = Field(..., ge=0)
