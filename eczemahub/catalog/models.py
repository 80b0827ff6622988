"""
Catalog data model: resource records and their categories.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr


class Category(str, Enum):
    """Fixed resource categories. Declaration order is the index key order."""
    TREATMENT = "Treatment"
    PREVENTION = "Prevention"
    RESEARCH = "Research"
    DIET_ADVICE = "DietAdvice"
    TESTIMONIAL = "Testimonial"
    MEDICAL_ADVICE = "MedicalAdvice"

    @property
    def ordinal(self) -> int:
        return _ORDINALS[self]


_ORDINALS = {category: i for i, category in enumerate(Category)}


class Resource(BaseModel):
    """A catalog record. Only the store mutates these; callers get copies.

    Scalar fields are strict: a restored snapshot must carry the exact JSON
    types, never "3" for 3 or "yes" for true.
    """

    model_config = ConfigDict(extra="forbid")

    id: StrictInt
    title: StrictStr
    description: StrictStr
    category: Category
    created_at: StrictInt
    updated_at: StrictInt
    verified: StrictBool = False
    created_by: StrictStr  # Identity
