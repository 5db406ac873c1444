"""
Schemas & Canonicalization
File: proof.py

Purpose: JSON envelope for a single Merkle inclusion proof.

The proof itself is a plain list of sibling digests; this record adds the
context a third party needs to check it offline (which hash primitive,
which combination order, which root).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


CombineOrder = Literal["sorted", "positional"]
SiblingSide = Literal["left", "right"]


class MerkleProofRecord(BaseModel):
    """
    A Merkle inclusion proof together with its verification context.

    `siblings` are leaf-to-root ordered. For positional trees `sides`
    records, per level, which side the sibling sits on.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    algorithm: str = Field(default="sha256", description="hashlib algorithm name")
    combine_order: CombineOrder = Field(default="sorted")
    root: str = Field(..., description="Claimed root digest", min_length=1)
    leaf: str = Field(..., description="Digest of the proven leaf", min_length=1)
    index: int | None = Field(default=None, ge=0, description="Leaf position, informational")
    siblings: list[str] = Field(default_factory=list)
    sides: list[SiblingSide] | None = Field(default=None)

    @field_validator("sides")
    @classmethod
    def _sides_match_siblings(
        cls, v: list[SiblingSide] | None, info: ValidationInfo
    ) -> list[SiblingSide] | None:
        """Ensure there is one side per sibling."""
        siblings = info.data.get("siblings", [])
        if v is not None and len(v) != len(siblings):
            raise ValueError(
                f"sides has {len(v)} entries but siblings has {len(siblings)}"
            )
        return v

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.siblings)
