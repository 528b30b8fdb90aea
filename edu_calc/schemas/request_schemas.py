from pydantic import BaseModel, Field
from typing import Any, Dict


class SolveRequest(BaseModel):
    """Run one calculator on raw form fields"""
    calculator_id: str = Field(..., description="Calculator id, e.g. 'Quadratic Equation Solver'", min_length=1)
    fields: Dict[str, Any] = Field(default_factory=dict, description="Form values keyed by field name")

    class Config:
        json_schema_extra = {
            "example": {
                "calculator_id": "Quadratic Equation Solver",
                "fields": {"a": 1, "b": -3, "c": 2}
            }
        }
