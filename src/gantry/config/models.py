# src/gantry/config/models.py

from typing import List, Optional

from pydantic import BaseModel, Field

from ..remote.state import RemoteStateSpec


class ExtraArguments(BaseModel):
    name: str
    commands: List[str] = Field(default_factory=list)   # terraform commands these apply to
    arguments: List[str] = Field(default_factory=list)


class TerraformSpec(BaseModel):
    source: Optional[str] = None
    extra_arguments: List[ExtraArguments] = Field(default_factory=list)


class Dependencies(BaseModel):
    paths: List[str] = Field(default_factory=list)


class GantryConfig(BaseModel):
    terraform: Optional[TerraformSpec] = None
    remote_state: Optional[RemoteStateSpec] = None
    dependencies: Optional[Dependencies] = None

    def extra_args_for(self, command: str) -> List[str]:
        """
        Returns the extra_arguments of every block whose commands include
        *command*, in declaration order.
        """
        if self.terraform is None:
            return []
        out: List[str] = []
        for extra in self.terraform.extra_arguments:
            if command in extra.commands:
                out.extend(extra.arguments)
        return out

    def dependency_paths(self) -> List[str]:
        return list(self.dependencies.paths) if self.dependencies else []
