from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class NewTodo(BaseModel):
    """
    Body of POST /todo. New items always start with completed=false.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"title": "buy milk"}})

    title: str = Field(..., description="Title of the todo item")


# PUBLIC_INTERFACE
class UpdatedTodo(BaseModel):
    """
    Body of PUT /todo/{id}. Both fields overwrite the stored values.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"title": "buy milk", "completed": True}}
    )

    title: str = Field(..., description="New title")
    completed: bool = Field(..., description="New completion status")


# PUBLIC_INTERFACE
class Todo(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"id": 1, "title": "buy milk", "completed": False}}
    )

    id: int = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Title of the todo item")
    completed: bool = Field(..., description="Completion status flag")
