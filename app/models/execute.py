from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.result import NormalizedResult


class ExecuteRequest(BaseModel):
    items: List[Dict[str, Any]] = Field(
        min_length=1,
        description="One parameter set per input item (operation, source, content, options).",
    )
    continue_on_fail: bool = Field(
        default=False,
        description="Record per-item errors in the output instead of aborting the batch.",
    )


class PairedItem(BaseModel):
    item: int


class ItemError(BaseModel):
    error: str


class OutputItem(BaseModel):
    """One output entry, paired with the index of the input item it came from."""

    model_config = ConfigDict(populate_by_name=True)

    data: Union[NormalizedResult, ItemError] = Field(alias="json")
    paired_item: PairedItem = Field(alias="pairedItem")


class ExecuteResponse(BaseModel):
    items: List[OutputItem]


class OperationInfo(BaseModel):
    name: str
    display_name: str
    endpoint: str
    options: List[str]
